"""Wrap normalized events in the wire envelope and hand them to the client."""

from __future__ import annotations

from typing import Any, Protocol

from furby_link.events.normalized import NormalizedEvent, make_envelope
from furby_link.runtime import telemetry
from furby_link.state.session import Session


class Sender(Protocol):
    def send(self, topic: str, payload: Any) -> bool: ...


class Notifier:
    """Best-effort, attempt-once delivery of normalized events."""

    def __init__(
        self, session: Session, sender: Sender, *, client_id: str, topic: str
    ) -> None:
        self.session = session
        self.sender = sender
        self.client_id = client_id
        self.topic = topic
        self.logger = telemetry.get_logger("furby_link.notifier")

    def notify(self, event: NormalizedEvent) -> bool:
        if not self.session.connected:
            self.logger.debug(f"dropped {event.type} event while disconnected")
            return False
        envelope = make_envelope(self.client_id, event)
        try:
            sent = bool(self.sender.send(self.topic, envelope))
        except Exception as exc:
            self.logger.warning(f"dropped {event.type} event: {exc}")
            return False
        if sent:
            telemetry.record_event(
                f"notify.{event.type}",
                level="debug",
                data=envelope["message"],
                logger_name="furby_link.notifier",
            )
        return sent


__all__ = ["Notifier", "Sender"]
