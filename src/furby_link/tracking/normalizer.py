"""State machine turning raw host events into normalized link events."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Type

from furby_link.events.normalized import (
    ActiveEvent,
    ChangeEvent,
    CloseEvent,
    CursorEvent,
    LinterEvent,
    NormalizedEvent,
    OpenEvent,
)
from furby_link.events.raw import (
    ActiveEditorChanged,
    DiagnosticsChanged,
    DocumentChanged,
    DocumentClosed,
    DocumentOpened,
    DocumentRef,
    RawEvent,
    SelectionChanged,
)
from furby_link.runtime import telemetry
from furby_link.state.session import Session

from .diagnostics import count_diagnostics
from .host import EditorHost

Handler = Callable[[RawEvent], List[NormalizedEvent]]


class EventNormalizer:
    """Owns the per-file store and every decision about what to emit.

    Each handler mutates ``session.files`` as needed and returns the
    normalized events in emission order. Nothing here touches the transport.
    """

    def __init__(self, session: Session, host: EditorHost) -> None:
        self.session = session
        self.host = host
        self.logger = telemetry.get_logger("furby_link.normalizer")
        self._handlers: Dict[Type[object], Handler] = {
            DocumentOpened: self.on_document_opened,  # type: ignore[dict-item]
            DocumentClosed: self.on_document_closed,  # type: ignore[dict-item]
            ActiveEditorChanged: self.on_active_editor_changed,  # type: ignore[dict-item]
            SelectionChanged: self.on_selection_changed,  # type: ignore[dict-item]
            DocumentChanged: self.on_document_changed,  # type: ignore[dict-item]
            DiagnosticsChanged: self.on_diagnostics_changed,  # type: ignore[dict-item]
        }

    def handle(self, event: RawEvent) -> List[NormalizedEvent]:
        handler = self._handlers.get(type(event))
        if handler is None:
            self.logger.debug(f"ignored unknown host event {type(event).__name__}")
            return []
        return handler(event)

    def on_document_opened(self, event: DocumentOpened) -> List[NormalizedEvent]:
        # Hosts open plenty of documents the user never sees; only the first
        # activation counts as an open.
        if self._irrelevant(event.document):
            return []
        self.session.files.open(event.document.path)
        return []

    def on_active_editor_changed(
        self, event: ActiveEditorChanged
    ) -> List[NormalizedEvent]:
        document = event.document
        if document is None or self._irrelevant(document):
            return []
        emitted: List[NormalizedEvent] = []
        if self.session.files.activate(document.path):
            emitted.append(OpenEvent(path=document.path))
        emitted.append(ActiveEvent(path=document.path))
        emitted.extend(self.report_status(document))
        return emitted

    def on_document_closed(self, event: DocumentClosed) -> List[NormalizedEvent]:
        if self._irrelevant(event.document):
            return []
        self.session.files.close(event.document.path)
        return [CloseEvent(path=event.document.path)]

    def on_selection_changed(self, event: SelectionChanged) -> List[NormalizedEvent]:
        if self._irrelevant(event.document):
            return []
        if not self._is_active(event.document):
            return []
        if len(event.selections) != 1:
            return []
        selection = event.selections[0]
        if not selection.is_empty:
            return []
        current = selection.start
        previous = self.session.files.record_selection(event.document.path, current)
        return [CursorEvent(previous=previous, current=current)]

    def on_document_changed(self, event: DocumentChanged) -> List[NormalizedEvent]:
        if self._irrelevant(event.document):
            return []
        emitted: List[NormalizedEvent] = [
            ChangeEvent(change=change.text, line=event.line_text(change.range.start.line))
            for change in event.changes
        ]
        emitted.extend(self.report_status(event.document))
        return emitted

    def on_diagnostics_changed(
        self, event: DiagnosticsChanged
    ) -> List[NormalizedEvent]:
        active = self._active_document()
        if active is None or active.path not in event.paths:
            return []
        return self.report_status(active)

    def set_enabled(self, enabled: bool) -> List[NormalizedEvent]:
        """Flip the diagnostics toggle and re-report the active file now."""

        self.session.enabled = enabled
        telemetry.record_event(
            "session.enabled",
            data={"enabled": enabled},
            logger_name="furby_link.normalizer",
        )
        active = self._active_document()
        if active is None:
            return []
        return self.report_status(active)

    def report_status(self, document: DocumentRef) -> List[NormalizedEvent]:
        if not self.session.enabled:
            return []
        if not document.is_local_file:
            return []
        if not self._is_active(document):
            return []
        counts = count_diagnostics(self.host, document.path)
        return [LinterEvent(errors=counts.errors, warnings=counts.warnings)]

    def _active_document(self) -> Optional[DocumentRef]:
        try:
            return self.host.active_document()
        except Exception as exc:
            self.logger.warning(f"host could not report the active editor: {exc}")
            return None

    def _is_active(self, document: DocumentRef) -> bool:
        active = self._active_document()
        return active is not None and active.path == document.path

    def _irrelevant(self, document: DocumentRef) -> bool:
        if document.is_local_file:
            return False
        self.logger.debug(f"ignored {document.scheme} document {document.path}")
        return True


__all__ = ["EventNormalizer"]
