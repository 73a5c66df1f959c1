"""Session and per-file state tracked by the link."""

from .files import FileState, FileStateStore, FileStatus
from .positions import Position, Range, Selection
from .session import Session

__all__ = [
    "FileState",
    "FileStateStore",
    "FileStatus",
    "Position",
    "Range",
    "Selection",
    "Session",
]
