"""Normalized events forwarded to the companion service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Union

from furby_link.state.positions import Position


@dataclass(frozen=True, slots=True)
class OpenEvent:
    type: ClassVar[str] = "open"
    path: str

    def to_message(self) -> Dict[str, Any]:
        return {"type": self.type, "path": self.path}


@dataclass(frozen=True, slots=True)
class ActiveEvent:
    type: ClassVar[str] = "active"
    path: str

    def to_message(self) -> Dict[str, Any]:
        return {"type": self.type, "path": self.path}


@dataclass(frozen=True, slots=True)
class CloseEvent:
    type: ClassVar[str] = "close"
    path: str

    def to_message(self) -> Dict[str, Any]:
        return {"type": self.type, "path": self.path}


@dataclass(frozen=True, slots=True)
class CursorEvent:
    type: ClassVar[str] = "cursor"
    previous: Position
    current: Position

    def to_message(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "previous": self.previous.to_message(),
            "current": self.current.to_message(),
        }


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    type: ClassVar[str] = "change"
    change: str
    line: str

    def to_message(self) -> Dict[str, Any]:
        return {"type": self.type, "change": self.change, "line": self.line}


@dataclass(frozen=True, slots=True)
class LinterEvent:
    """Diagnostic summary for the active file.

    ``count`` mirrors ``errors``; downstream consumers read it as the badge
    number.
    """

    type: ClassVar[str] = "linter"
    errors: int
    warnings: int

    @property
    def count(self) -> int:
        return self.errors

    def to_message(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "count": self.count,
            "errors": self.errors,
            "warnings": self.warnings,
        }


NormalizedEvent = Union[
    OpenEvent, ActiveEvent, CloseEvent, CursorEvent, ChangeEvent, LinterEvent
]


def make_envelope(client_id: str, event: NormalizedEvent) -> Dict[str, Any]:
    return {"id": client_id, "message": event.to_message()}


__all__ = [
    "OpenEvent",
    "ActiveEvent",
    "CloseEvent",
    "CursorEvent",
    "ChangeEvent",
    "LinterEvent",
    "NormalizedEvent",
    "make_envelope",
]
