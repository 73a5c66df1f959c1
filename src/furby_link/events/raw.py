"""Host-independent shapes of the editor events the link consumes.

Host adapters translate their native objects into these before handing them
to the bridge. Only the fields the normalizer reads are carried.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Optional, Sequence, Tuple, Union

from furby_link.exceptions import EventValidationError
from furby_link.state.positions import Range, Selection

FILE_SCHEME = "file"


@dataclass(frozen=True, slots=True)
class DocumentRef:
    path: str
    scheme: str = FILE_SCHEME

    def __post_init__(self) -> None:
        if not self.path:
            raise EventValidationError("Document path cannot be empty")

    @property
    def is_local_file(self) -> bool:
        return self.scheme == FILE_SCHEME


class DiagnosticSeverity(IntEnum):
    ERROR = 0
    WARNING = 1
    INFORMATION = 2
    HINT = 3


@dataclass(frozen=True, slots=True)
class Diagnostic:
    range: Range
    message: str
    # Kept as a plain int so hosts can report codes outside the enum.
    severity: int = DiagnosticSeverity.ERROR


@dataclass(frozen=True, slots=True)
class ContentChange:
    """One discrete replacement inside a document edit."""

    range: Range
    text: str


@dataclass(frozen=True, slots=True)
class DocumentOpened:
    document: DocumentRef


@dataclass(frozen=True, slots=True)
class DocumentClosed:
    document: DocumentRef


@dataclass(frozen=True, slots=True)
class ActiveEditorChanged:
    """Focus moved; ``document`` is ``None`` when no editor has focus."""

    document: Optional[DocumentRef]


@dataclass(frozen=True, slots=True)
class SelectionChanged:
    document: DocumentRef
    selections: Tuple[Selection, ...]


@dataclass(frozen=True, slots=True)
class DocumentChanged:
    """A batch of content changes plus the document text after applying them."""

    document: DocumentRef
    changes: Tuple[ContentChange, ...]
    lines: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_text(
        cls, document: DocumentRef, changes: Iterable[ContentChange], text: str
    ) -> "DocumentChanged":
        return cls(document=document, changes=tuple(changes), lines=_split_lines(text))

    def line_text(self, line: int) -> str:
        if 0 <= line < len(self.lines):
            return self.lines[line]
        return ""


@dataclass(frozen=True, slots=True)
class DiagnosticsChanged:
    paths: Tuple[str, ...]

    @classmethod
    def for_documents(cls, documents: Sequence[DocumentRef]) -> "DiagnosticsChanged":
        return cls(paths=tuple(document.path for document in documents))


RawEvent = Union[
    DocumentOpened,
    DocumentClosed,
    ActiveEditorChanged,
    SelectionChanged,
    DocumentChanged,
    DiagnosticsChanged,
]


def _split_lines(text: str) -> Tuple[str, ...]:
    lines = text.splitlines()
    if not lines or text.endswith(("\n", "\r")):
        lines.append("")
    return tuple(lines)


__all__ = [
    "FILE_SCHEME",
    "DocumentRef",
    "DiagnosticSeverity",
    "Diagnostic",
    "ContentChange",
    "DocumentOpened",
    "DocumentClosed",
    "ActiveEditorChanged",
    "SelectionChanged",
    "DocumentChanged",
    "DiagnosticsChanged",
    "RawEvent",
]
