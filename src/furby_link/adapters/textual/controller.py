"""In-process editor host backing the Textual demo.

``TextualEditorHost`` answers the link's host queries from its own document
table. ``TextualLinkAdapter`` turns widget-level happenings (open, focus,
selection, edited text) into raw link events and feeds them to the bridge.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Tuple

from furby_link.bridge import FurbyBridge
from furby_link.events.normalized import NormalizedEvent
from furby_link.events.raw import (
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
from furby_link.exceptions import EventValidationError
from furby_link.runtime import telemetry
from furby_link.state.positions import Position, Range

Location = Tuple[int, int]

LONG_LINE_LIMIT = 100


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualHostHooks:
    """Callbacks the host uses to reach the Textual UI."""

    show_message: Callable[[str], None] = _noop
    update_status: Callable[[str], None] = _noop


class SelectionLike(Protocol):
    start: Location
    end: Location


class TextualEditorHost:
    """Document table, focus and diagnostics for a single-window editor."""

    def __init__(self, hooks: Optional[TextualHostHooks] = None) -> None:
        self.hooks = hooks or TextualHostHooks()
        self.documents: Dict[str, str] = {}
        self.diagnostics: Dict[str, Tuple[Diagnostic, ...]] = {}
        self.active_path: Optional[str] = None

    def active_document(self) -> Optional[DocumentRef]:
        if self.active_path is None:
            return None
        return DocumentRef(self.active_path)

    def get_diagnostics(self, path: str) -> Sequence[Diagnostic]:
        return self.diagnostics.get(path, ())

    def show_information_message(self, message: str) -> None:
        self.hooks.show_message(message)


def offset_to_location(text: str, offset: int) -> Location:
    line = text.count("\n", 0, offset)
    line_start = text.rfind("\n", 0, offset) + 1
    return (line, offset - line_start)


def diff_edit(before: str, after: str) -> Optional[ContentChange]:
    """Describe the change from ``before`` to ``after`` as one replacement."""

    if before == after:
        return None
    limit = min(len(before), len(after))
    prefix = 0
    while prefix < limit and before[prefix] == after[prefix]:
        prefix += 1
    suffix = 0
    while (
        suffix < limit - prefix
        and before[len(before) - 1 - suffix] == after[len(after) - 1 - suffix]
    ):
        suffix += 1
    start = offset_to_location(before, prefix)
    end = offset_to_location(before, len(before) - suffix)
    return ContentChange(
        range=Range.span(start, end), text=after[prefix : len(after) - suffix]
    )


def syntax_diagnostics(path: str, text: str) -> Tuple[Diagnostic, ...]:
    """Toy diagnostic source: Python syntax errors plus over-long lines."""

    found: List[Diagnostic] = []
    if path.endswith(".py"):
        try:
            compile(text, path, "exec")
        except SyntaxError as exc:
            line = max((exc.lineno or 1) - 1, 0)
            column = max((exc.offset or 1) - 1, 0)
            found.append(
                Diagnostic(Range.at(line, column), exc.msg, DiagnosticSeverity.ERROR)
            )
        except ValueError as exc:
            found.append(Diagnostic(Range.at(0, 0), str(exc), DiagnosticSeverity.ERROR))
    for index, line_text in enumerate(text.split("\n")):
        if len(line_text) > LONG_LINE_LIMIT:
            found.append(
                Diagnostic(
                    Range.at(index, LONG_LINE_LIMIT),
                    f"line longer than {LONG_LINE_LIMIT} characters",
                    DiagnosticSeverity.WARNING,
                )
            )
    return tuple(found)


class TextualLinkAdapter:
    """Keeps ``TextualEditorHost`` in sync and forwards raw events."""

    def __init__(self, bridge: FurbyBridge, host: TextualEditorHost) -> None:
        self.bridge = bridge
        self.host = host
        self.logger = telemetry.get_logger("furby_link.adapters.textual")

    def open_document(self, path: str, text: str) -> List[NormalizedEvent]:
        self.host.documents[path] = text
        self.host.diagnostics[path] = syntax_diagnostics(path, text)
        return self._dispatch(lambda: DocumentOpened(DocumentRef(path)))

    def focus(self, path: Optional[str]) -> List[NormalizedEvent]:
        self.host.active_path = path
        return self._dispatch(
            lambda: ActiveEditorChanged(DocumentRef(path) if path else None)
        )

    def close_document(self, path: str) -> List[NormalizedEvent]:
        self.host.documents.pop(path, None)
        self.host.diagnostics.pop(path, None)
        if self.host.active_path == path:
            self.host.active_path = None
        return self._dispatch(lambda: DocumentClosed(DocumentRef(path)))

    def selection_changed(
        self, path: str, selections: Sequence[SelectionLike]
    ) -> List[NormalizedEvent]:
        def build() -> RawEvent:
            ranges = tuple(
                Range(*sorted((Position(*item.start), Position(*item.end))))
                for item in selections
            )
            return SelectionChanged(DocumentRef(path), ranges)

        return self._dispatch(build)

    def text_changed(self, path: str, text: str) -> List[NormalizedEvent]:
        before = self.host.documents.get(path, "")
        change = diff_edit(before, text)
        if change is None:
            return []
        self.host.documents[path] = text
        emitted = self._dispatch(
            lambda: DocumentChanged.from_text(DocumentRef(path), (change,), text)
        )
        diagnostics = syntax_diagnostics(path, text)
        if diagnostics != self.host.diagnostics.get(path, ()):
            self.host.diagnostics[path] = diagnostics
            emitted.extend(self._dispatch(lambda: DiagnosticsChanged(paths=(path,))))
        return emitted

    def run_command(self, command_id: str) -> List[NormalizedEvent]:
        emitted = self.bridge.run_command(command_id)
        self.publish_status()
        return emitted

    def publish_status(self) -> None:
        self.host.hooks.update_status(self.status_line())

    def status_line(self) -> str:
        session = self.bridge.session
        link = "connected" if session.connected else "offline"
        state = "on" if session.enabled else "off"
        path = self.host.active_path
        counts = ""
        if path is not None:
            diagnostics = self.host.get_diagnostics(path)
            errors = sum(1 for d in diagnostics if d.severity == DiagnosticSeverity.ERROR)
            warnings = sum(
                1 for d in diagnostics if d.severity == DiagnosticSeverity.WARNING
            )
            counts = f" | E{errors} W{warnings}"
        return f"furby: {link} | linter {state}{counts}"

    def _dispatch(self, build: Callable[[], RawEvent]) -> List[NormalizedEvent]:
        try:
            event = build()
        except EventValidationError as exc:
            self.logger.warning(f"dropped malformed host event: {exc}")
            return []
        emitted = self.bridge.dispatch(event)
        self.publish_status()
        return emitted


__all__ = [
    "TextualHostHooks",
    "TextualEditorHost",
    "TextualLinkAdapter",
    "diff_edit",
    "offset_to_location",
    "syntax_diagnostics",
]
