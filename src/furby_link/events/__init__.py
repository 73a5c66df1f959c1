"""Raw host events in, normalized events out."""

from .normalized import (
    ActiveEvent,
    ChangeEvent,
    CloseEvent,
    CursorEvent,
    LinterEvent,
    NormalizedEvent,
    OpenEvent,
    make_envelope,
)
from .raw import (
    FILE_SCHEME,
    ActiveEditorChanged,
    ContentChange,
    Diagnostic,
    DiagnosticSeverity,
    DiagnosticsChanged,
    DocumentChanged,
    DocumentClosed,
    DocumentOpened,
    DocumentRef,
    RawEvent,
    SelectionChanged,
)

__all__ = [
    "FILE_SCHEME",
    "ActiveEditorChanged",
    "ContentChange",
    "Diagnostic",
    "DiagnosticSeverity",
    "DiagnosticsChanged",
    "DocumentChanged",
    "DocumentClosed",
    "DocumentOpened",
    "DocumentRef",
    "RawEvent",
    "SelectionChanged",
    "ActiveEvent",
    "ChangeEvent",
    "CloseEvent",
    "CursorEvent",
    "LinterEvent",
    "NormalizedEvent",
    "OpenEvent",
    "make_envelope",
]
