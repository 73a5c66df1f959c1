"""Stand-in companion service that records what the link sends.

Run ``furby-link-listen`` to watch envelopes arrive while the demo host is
used, or start a ``CompanionListener`` in tests to assert on real frames.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
from collections import deque
from contextlib import suppress
from typing import Any, Callable, Deque, List, Optional, Sequence, Set

from furby_link.config import LinkConfig, load_config
from furby_link.runtime import telemetry

from .framing import Frame, FrameDecoder, encode_frame


class CompanionListener:
    """Accepts link clients on a unix socket and collects decoded frames."""

    def __init__(
        self,
        path: str,
        *,
        history: int = 500,
        on_frame: Optional[Callable[[Frame], None]] = None,
    ) -> None:
        self.path = path
        self.received: Deque[Frame] = deque(maxlen=history)
        self._on_frame = on_frame
        self._server: asyncio.AbstractServer | None = None
        self._clients: Set[asyncio.StreamWriter] = set()
        self._changed = asyncio.Condition()
        self.logger = telemetry.get_logger("furby_link.listener")

    @classmethod
    def for_config(cls, config: LinkConfig, **kwargs: Any) -> "CompanionListener":
        return cls(config.socket_path(), **kwargs)

    @property
    def client_count(self) -> int:
        return len(self._clients)

    async def start(self) -> None:
        if self._server is not None:
            return
        with suppress(FileNotFoundError):
            os.unlink(self.path)
        self._server = await asyncio.start_unix_server(self._handle_client, path=self.path)
        self.logger.info(f"listening on {self.path}")

    async def stop(self) -> None:
        server, self._server = self._server, None
        if server is not None:
            server.close()
        # Newer asyncio waits for open connections in wait_closed().
        for writer in list(self._clients):
            await self._close_writer(writer)
        if server is not None:
            await server.wait_closed()
        with suppress(FileNotFoundError):
            os.unlink(self.path)

    async def drop_clients(self) -> None:
        """Close every client socket but keep listening."""

        for writer in list(self._clients):
            await self._close_writer(writer)

    async def broadcast(self, topic: str, data: Any) -> None:
        frame = encode_frame(topic, data)
        for writer in list(self._clients):
            try:
                writer.write(frame)
                await writer.drain()
            except (ConnectionError, OSError):
                await self._close_writer(writer)

    async def wait_for_frames(self, count: int, *, timeout: float = 2.0) -> List[Frame]:
        async with self._changed:
            await asyncio.wait_for(
                self._changed.wait_for(lambda: len(self.received) >= count), timeout
            )
        return list(self.received)

    async def wait_for_clients(self, count: int = 1, *, timeout: float = 2.0) -> None:
        async with self._changed:
            await asyncio.wait_for(
                self._changed.wait_for(lambda: len(self._clients) >= count), timeout
            )

    async def _handle_client(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self._clients.add(writer)
        await self._notify_changed()
        decoder = FrameDecoder()
        try:
            while True:
                try:
                    chunk = await reader.read(4096)
                except (ConnectionError, OSError):
                    break
                if not chunk:
                    break
                for frame in decoder.feed(chunk):
                    self.received.append(frame)
                    if self._on_frame is not None:
                        self._on_frame(frame)
                await self._notify_changed()
        finally:
            await self._close_writer(writer)

    async def _notify_changed(self) -> None:
        async with self._changed:
            self._changed.notify_all()

    async def _close_writer(self, writer: asyncio.StreamWriter) -> None:
        self._clients.discard(writer)
        writer.close()
        with suppress(Exception):
            await writer.wait_closed()
        await self._notify_changed()


def _print_frame(frame: Frame) -> None:
    print(f"{frame.topic} {json.dumps(frame.data, ensure_ascii=False)}", flush=True)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    config = load_config()
    parser = argparse.ArgumentParser(
        description="Print every envelope a furby link client sends."
    )
    parser.add_argument(
        "--service",
        default=config.service_name,
        help=f"Service name to listen as (default: {config.service_name})",
    )
    parser.add_argument(
        "--socket-root",
        default=config.socket_root,
        help=f"Directory prefix for the socket (default: {config.socket_root})",
    )
    parser.add_argument(
        "--log-preset",
        choices=telemetry.PRESETS,
        default=None,
        help="Telemetry preset (default: FURBY_LINK_LOG_* environment)",
    )
    return parser.parse_args(argv)


async def _serve(path: str) -> None:
    listener = CompanionListener(path, on_frame=_print_frame)
    await listener.start()
    try:
        await asyncio.Event().wait()
    finally:
        await listener.stop()


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    config = load_config().with_overrides(
        service_name=args.service, socket_root=args.socket_root
    )
    with suppress(KeyboardInterrupt):
        asyncio.run(_serve(config.socket_path()))


if __name__ == "__main__":  # pragma: no cover - manual tool
    main()


__all__ = ["CompanionListener", "main"]
