"""Per-file open/activation state and last observed cursor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional

from .positions import Position


class FileStatus(str, Enum):
    OPENED_INACTIVE = "opened_inactive"
    OPENED_ACTIVE = "opened_active"


@dataclass(slots=True)
class FileState:
    """What the link remembers about one open document."""

    path: str
    status: FileStatus = FileStatus.OPENED_INACTIVE
    last_selection: Optional[Position] = None

    @property
    def activated(self) -> bool:
        return self.status is FileStatus.OPENED_ACTIVE


class FileStateStore:
    """Path-keyed FileState records.

    A path is present exactly between its open and its close. Absence stands
    for the never-opened state, so nothing here materializes it.
    """

    def __init__(self) -> None:
        self._files: Dict[str, FileState] = {}

    def __contains__(self, path: object) -> bool:
        return path in self._files

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def get(self, path: str) -> Optional[FileState]:
        return self._files.get(path)

    def open(self, path: str) -> FileState:
        """Track ``path`` as opened but not yet shown; existing records win."""

        state = self._files.get(path)
        if state is None:
            state = FileState(path=path)
            self._files[path] = state
        return state

    def activate(self, path: str) -> bool:
        """Mark ``path`` active, creating it if needed.

        Returns ``True`` only for the first activation since the path was
        opened, which is the moment the user actually opened the file.
        """

        state = self.open(path)
        if state.activated:
            return False
        state.status = FileStatus.OPENED_ACTIVE
        return True

    def close(self, path: str) -> Optional[FileState]:
        return self._files.pop(path, None)

    def record_selection(self, path: str, position: Position) -> Position:
        """Store ``position`` and return the one it replaces.

        The first report for a path has nothing to replace, so it is its own
        previous position. Untracked paths are answered the same way without
        being stored.
        """

        state = self._files.get(path)
        if state is None:
            return position
        previous = state.last_selection or position
        state.last_selection = position
        return previous


__all__ = ["FileStatus", "FileState", "FileStateStore"]
