from __future__ import annotations

import asyncio
import tempfile
from dataclasses import replace
from typing import Callable, List

import pytest

from furby_link.bridge import FurbyBridge
from furby_link.config import LinkConfig
from furby_link.events import ActiveEditorChanged, DocumentRef
from furby_link.exceptions import TransportError
from furby_link.transport import Frame, FrameDecoder, IpcClient, encode_frame
from furby_link.transport.listener import CompanionListener, _parse_args


@pytest.fixture
def config() -> LinkConfig:
    # Unix socket paths are length limited, so keep the root short.
    root = tempfile.mkdtemp(prefix="fl-", dir="/tmp")
    return LinkConfig(socket_root=f"{root}/", service_name="furby", retry_interval=0.05)


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.01)


def test_frames_round_trip_across_chunks() -> None:
    payload = {"id": "client", "message": {"type": "change", "change": "é", "line": "\f"}}
    raw = encode_frame("app.message", payload) + encode_frame("ping", None)
    decoder = FrameDecoder()

    frames: List[Frame] = []
    for index in range(0, len(raw), 5):
        frames.extend(decoder.feed(raw[index : index + 5]))

    assert frames[-1] == Frame(topic="ping", data=None)
    assert decoder.pending == 0


def test_decoder_skips_garbage() -> None:
    decoder = FrameDecoder()

    frames = decoder.feed(b"not json\f[1, 2]\f" + encode_frame("ok", 1))

    assert frames == [Frame(topic="ok", data=1)]


def test_send_before_connect_is_dropped(config: LinkConfig) -> None:
    client = IpcClient(config)

    assert client.connected is False
    assert client.send("app.message", {"id": "client"}) is False


class BrokenWriter:
    def is_closing(self) -> bool:
        return False

    def write(self, data: bytes) -> None:
        raise BrokenPipeError("peer went away")


def test_write_failure_becomes_transport_error_and_is_dropped(config: LinkConfig) -> None:
    client = IpcClient(config)
    writer = BrokenWriter()
    client._writer = writer  # type: ignore[assignment]

    with pytest.raises(TransportError):
        client._write(writer, b"{}\f")  # type: ignore[arg-type]
    assert client.send("app.message", {"id": "client"}) is False


def test_listener_cli_accepts_log_preset() -> None:
    assert _parse_args(["--log-preset", "production"]).log_preset == "production"
    assert _parse_args([]).log_preset is None
    with pytest.raises(SystemExit):
        _parse_args(["--log-preset", "verbose"])


def test_client_delivers_frames(config: LinkConfig) -> None:
    async def scenario():
        listener = CompanionListener.for_config(config)
        await listener.start()
        states: List[str] = []
        client = IpcClient(config, on_connect=states.append)
        try:
            client.connect()
            await wait_until(lambda: client.connected)
            assert client.send("app.message", {"id": "client", "message": {"type": "x"}})
            frames = await listener.wait_for_frames(1)
        finally:
            await client.aclose()
            await listener.stop()
        return states, frames

    states, frames = asyncio.run(scenario())

    assert states == ["connected"]
    assert frames == [
        Frame(topic="app.message", data={"id": "client", "message": {"type": "x"}})
    ]


def test_client_retries_until_service_appears(config: LinkConfig) -> None:
    async def scenario():
        downs: List[str] = []
        client = IpcClient(config, on_disconnect=downs.append)
        listener = CompanionListener.for_config(config)
        try:
            client.connect()
            await wait_until(lambda: len(downs) >= 2)
            assert client.send("app.message", {}) is False
            await listener.start()
            await wait_until(lambda: client.connected)
        finally:
            await client.aclose()
            await listener.stop()
        return downs, client.attempts

    downs, attempts = asyncio.run(scenario())

    assert set(downs) == {"disconnected"}
    assert attempts >= 3


def test_client_reconnects_after_drop(config: LinkConfig) -> None:
    config = replace(config, retry_interval=0.3)

    async def scenario():
        events: List[str] = []
        client = IpcClient(
            config, on_connect=events.append, on_disconnect=events.append
        )
        listener = CompanionListener.for_config(config)
        await listener.start()
        try:
            client.connect()
            await listener.wait_for_clients(1)
            await wait_until(lambda: client.connected)
            await listener.drop_clients()
            await wait_until(lambda: "disconnected" in events)
            dropped = client.send("app.message", {"lost": True})
            await wait_until(lambda: events.count("connected") >= 2)
            client.send("app.message", {"lost": False})
            frames = await listener.wait_for_frames(1)
        finally:
            await client.aclose()
            await listener.stop()
        return events, dropped, frames

    events, dropped, frames = asyncio.run(scenario())

    assert events[:2] == ["connected", "disconnected"]
    assert dropped is False
    assert [frame.data for frame in frames] == [{"lost": False}]


def test_client_surfaces_service_messages(config: LinkConfig) -> None:
    async def scenario():
        received: List[Frame] = []
        client = IpcClient(config, on_message=received.append)
        listener = CompanionListener.for_config(config)
        await listener.start()
        try:
            client.connect()
            await listener.wait_for_clients(1)
            await listener.broadcast("app.message", {"hello": "vs code"})
            await wait_until(lambda: bool(received))
        finally:
            await client.aclose()
            await listener.stop()
        return received

    received = asyncio.run(scenario())

    assert received == [Frame(topic="app.message", data={"hello": "vs code"})]


def test_bridge_announces_and_mirrors_over_socket(config: LinkConfig, host) -> None:
    async def scenario():
        listener = CompanionListener.for_config(config)
        await listener.start()
        bridge = FurbyBridge(host, config=config)
        try:
            bridge.activate()
            await wait_until(lambda: bridge.session.connected)
            host.focus("/work/app.py")
            bridge.dispatch(ActiveEditorChanged(DocumentRef("/work/app.py")))
            frames = await listener.wait_for_frames(4)
        finally:
            await bridge.aclose()
            await listener.stop()
        return frames

    frames = asyncio.run(scenario())

    assert {frame.topic for frame in frames} == {"app.message"}
    assert [frame.data["message"] for frame in frames] == [
        {"type": "open", "path": "file:///dev/vs-code-extension"},
        {"type": "open", "path": "/work/app.py"},
        {"type": "active", "path": "/work/app.py"},
        {"type": "linter", "count": 0, "errors": 0, "warnings": 0},
    ]
    assert all(frame.data["id"] == "client" for frame in frames)
