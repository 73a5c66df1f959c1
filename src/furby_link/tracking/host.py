"""What the link needs to ask the editor host at call time."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from furby_link.events.raw import Diagnostic, DocumentRef


class EditorHost(Protocol):
    """Read-side view of the host IDE used by the normalizer and commands."""

    def active_document(self) -> Optional[DocumentRef]:
        """Return the document of the focused editor, if any."""
        ...

    def get_diagnostics(self, path: str) -> Sequence[Diagnostic]:
        """Return the host's full current diagnostic list for ``path``."""
        ...

    def show_information_message(self, message: str) -> None:
        """Surface a short, non-modal message to the user."""
        ...


__all__ = ["EditorHost"]
