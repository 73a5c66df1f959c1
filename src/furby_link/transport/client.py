"""Reconnecting unix-socket client for the companion service."""

from __future__ import annotations

import asyncio
from contextlib import suppress
from typing import Any, Callable, List, Optional

from furby_link.config import LinkConfig
from furby_link.exceptions import TransportError
from furby_link.runtime import telemetry

from .framing import Frame, FrameDecoder, encode_frame

ConnectionCallback = Callable[[str], None]
MessageCallback = Callable[[Frame], None]


class IpcClient:
    """Keeps one connection to ``<socket_root><appspace><service>`` alive.

    ``connect`` schedules a retry loop on the running event loop: every
    failed attempt or dropped socket fires the disconnect callbacks and
    waits ``retry_interval`` seconds before trying again, forever. ``send``
    writes one frame when connected and drops it otherwise.
    """

    def __init__(
        self,
        config: Optional[LinkConfig] = None,
        *,
        on_connect: Optional[ConnectionCallback] = None,
        on_disconnect: Optional[ConnectionCallback] = None,
        on_message: Optional[MessageCallback] = None,
    ) -> None:
        self.config = config or LinkConfig()
        self.logger = telemetry.get_logger("furby_link.transport")
        self._on_connect: List[ConnectionCallback] = []
        self._on_disconnect: List[ConnectionCallback] = []
        self._on_message: List[MessageCallback] = []
        if on_connect:
            self._on_connect.append(on_connect)
        if on_disconnect:
            self._on_disconnect.append(on_disconnect)
        if on_message:
            self._on_message.append(on_message)
        self._service: Optional[str] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._task: Optional[asyncio.Task[None]] = None
        self.attempts = 0

    def register_on_connect(self, callback: ConnectionCallback) -> None:
        self._on_connect.append(callback)

    def register_on_disconnect(self, callback: ConnectionCallback) -> None:
        self._on_disconnect.append(callback)

    def register_on_message(self, callback: MessageCallback) -> None:
        self._on_message.append(callback)

    @property
    def socket_path(self) -> str:
        return self.config.socket_path(self._service)

    @property
    def connected(self) -> bool:
        writer = self._writer
        return writer is not None and not writer.is_closing()

    def connect(self, service_name: Optional[str] = None) -> None:
        """Start the connect/retry loop; must run inside an event loop."""

        if self._task is not None and not self._task.done():
            return
        self._service = service_name or self.config.service_name
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name=f"furby-link:{self._service}")
        self.logger.info(f"connecting to {self.socket_path} as {self.config.client_id}")

    def send(self, topic: str, payload: Any) -> bool:
        """Write one frame if connected. Never raises, never queues."""

        writer = self._writer
        if writer is None or writer.is_closing():
            self.logger.debug(f"dropped {topic} frame: not connected")
            return False
        try:
            frame = encode_frame(topic, payload)
        except (TypeError, ValueError) as exc:
            self.logger.error(f"dropped unserializable {topic} frame: {exc}")
            return False
        try:
            self._write(writer, frame)
        except TransportError as exc:
            self.logger.warning(f"dropped {topic} frame: {exc}")
            return False
        return True

    def _write(self, writer: asyncio.StreamWriter, frame: bytes) -> None:
        try:
            writer.write(frame)
        except (OSError, RuntimeError) as exc:
            raise TransportError(f"socket {self.socket_path} unusable: {exc}") from exc

    async def aclose(self) -> None:
        """Cancel the retry loop and close the socket."""

        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        await self._close_writer()

    async def _run(self) -> None:
        path = self.socket_path
        while True:
            self.attempts += 1
            try:
                reader, writer = await asyncio.open_unix_connection(path)
            except OSError as exc:
                self.logger.debug(f"connect attempt {self.attempts} to {path} failed: {exc}")
                self._fire(self._on_disconnect, "disconnected")
                await asyncio.sleep(self.config.retry_interval)
                continue

            self._writer = writer
            self.logger.info(f"connected to {self._service}")
            telemetry.record_event(
                "transport.connected",
                data={"service": self._service, "attempts": self.attempts},
                logger_name="furby_link.transport",
            )
            self._fire(self._on_connect, "connected")
            try:
                await self._read_until_closed(reader)
            finally:
                await self._close_writer()
            self.logger.info(f"disconnected from {self._service}")
            self._fire(self._on_disconnect, "disconnected")
            await asyncio.sleep(self.config.retry_interval)

    async def _read_until_closed(self, reader: asyncio.StreamReader) -> None:
        decoder = FrameDecoder()
        while True:
            try:
                chunk = await reader.read(4096)
            except (ConnectionError, OSError) as exc:
                self.logger.debug(f"read failed: {exc}")
                return
            if not chunk:
                return
            for frame in decoder.feed(chunk):
                self.logger.info(f"message from {self._service}: {frame.topic} {frame.data!r}")
                for callback in list(self._on_message):
                    try:
                        callback(frame)
                    except Exception as exc:
                        self.logger.warning(f"message callback failed: {exc}")

    async def _close_writer(self) -> None:
        writer, self._writer = self._writer, None
        if writer is None:
            return
        writer.close()
        with suppress(Exception):
            await writer.wait_closed()

    def _fire(self, callbacks: List[ConnectionCallback], state: str) -> None:
        for callback in list(callbacks):
            try:
                callback(state)
            except Exception as exc:
                self.logger.warning(f"{state} callback failed: {exc}")


__all__ = ["IpcClient", "ConnectionCallback", "MessageCallback"]
