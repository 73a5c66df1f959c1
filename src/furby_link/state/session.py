"""Process-wide session flags plus the per-file store."""

from __future__ import annotations

from dataclasses import dataclass, field

from .files import FileStateStore


@dataclass(slots=True)
class Session:
    """Single owner of the link's mutable state.

    ``enabled`` is flipped only by the enable/disable commands and gates
    diagnostic reports. ``connected`` mirrors the transport and is written
    only from its connect/disconnect callbacks.
    """

    enabled: bool = True
    connected: bool = False
    files: FileStateStore = field(default_factory=FileStateStore)

    def mark_connected(self, *_args: object) -> None:
        self.connected = True

    def mark_disconnected(self, *_args: object) -> None:
        self.connected = False


__all__ = ["Session"]
