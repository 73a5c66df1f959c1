"""Line/character positions, ranges and selections as reported by hosts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from furby_link.exceptions import EventValidationError


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """Zero-based cursor location inside a document."""

    line: int
    character: int

    def __post_init__(self) -> None:
        if self.line < 0 or self.character < 0:
            raise EventValidationError(
                "Position coordinates must be non-negative",
                value=(self.line, self.character),
            )

    def to_message(self) -> Dict[str, int]:
        return {"line": self.line, "character": self.character}


@dataclass(frozen=True, slots=True)
class Range:
    start: Position
    end: Position

    @classmethod
    def at(cls, line: int, character: int) -> "Range":
        point = Position(line, character)
        return cls(point, point)

    @classmethod
    def span(cls, start: tuple[int, int], end: tuple[int, int]) -> "Range":
        return cls(Position(*start), Position(*end))

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


# A selection carries the same start/end shape as a range; hosts that track
# anchor/active separately normalize to start/end before building events.
Selection = Range

__all__ = ["Position", "Range", "Selection"]
