"""Composition root wiring host events through to the companion service."""

from __future__ import annotations

from typing import Iterable, List, Optional

from furby_link.commands import CommandRegistry, register_default_commands
from furby_link.config import LinkConfig, load_config
from furby_link.events.normalized import NormalizedEvent, OpenEvent
from furby_link.events.raw import RawEvent
from furby_link.runtime import telemetry
from furby_link.state.session import Session
from furby_link.tracking.host import EditorHost
from furby_link.tracking.normalizer import EventNormalizer
from furby_link.transport.client import IpcClient
from furby_link.transport.notifier import Notifier


class FurbyBridge:
    """Owns the session and pushes every host event through the pipeline.

    Host adapters call ``dispatch`` from their event callbacks and
    ``run_command`` from their command bindings. Both return the normalized
    events that were produced, whether or not they could be delivered.
    """

    def __init__(
        self,
        host: EditorHost,
        *,
        config: Optional[LinkConfig] = None,
        client: Optional[IpcClient] = None,
        session: Optional[Session] = None,
    ) -> None:
        self.host = host
        self.config = config or load_config()
        self.session = session or Session(enabled=self.config.enabled)
        self.logger = telemetry.get_logger("furby_link.bridge")
        self.normalizer = EventNormalizer(self.session, host)
        self.client = client or IpcClient(self.config)
        self.client.register_on_connect(self._handle_connect)
        self.client.register_on_disconnect(self._handle_disconnect)
        self.notifier = Notifier(
            self.session,
            self.client,
            client_id=self.config.client_id,
            topic=self.config.topic,
        )
        self.commands = register_default_commands(
            CommandRegistry(), self.normalizer, host
        )

    def activate(self) -> None:
        self.logger.info(f"furby link active, service={self.config.service_name}")
        self.client.connect(self.config.service_name)

    async def aclose(self) -> None:
        await self.client.aclose()

    def dispatch(self, event: RawEvent) -> List[NormalizedEvent]:
        name = type(event).__name__
        try:
            with telemetry.span(
                "bridge::dispatch",
                logger_name="furby_link.bridge",
                component="bridge",
                metadata={"event": name},
            ):
                emitted = self.normalizer.handle(event)
        except Exception as exc:
            self.logger.error(f"failed to handle {name}: {exc}")
            return []
        self._deliver(emitted)
        return emitted

    def run_command(self, command_id: str) -> List[NormalizedEvent]:
        emitted = self.commands.run(command_id)
        self._deliver(emitted)
        return emitted

    def _deliver(self, events: Iterable[NormalizedEvent]) -> None:
        for event in events:
            self.notifier.notify(event)

    def _handle_connect(self, _state: str) -> None:
        self.session.mark_connected()
        if self.config.announce_path:
            self.notifier.notify(OpenEvent(path=self.config.announce_path))

    def _handle_disconnect(self, _state: str) -> None:
        self.session.mark_disconnected()


__all__ = ["FurbyBridge"]
