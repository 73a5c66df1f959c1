from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from furby_link.events import Diagnostic, DocumentRef
from furby_link.state import Range


class FakeHost:
    """EditorHost double with a settable active document and diagnostics."""

    def __init__(self) -> None:
        self.active: Optional[DocumentRef] = None
        self.diagnostics: Dict[str, List[Diagnostic]] = {}
        self.messages: List[str] = []

    def focus(self, path: Optional[str], scheme: str = "file") -> None:
        self.active = DocumentRef(path, scheme) if path else None

    def add_diagnostic(self, path: str, severity: int, message: str = "issue") -> None:
        self.diagnostics.setdefault(path, []).append(
            Diagnostic(Range.at(0, 0), message, severity)
        )

    def active_document(self) -> Optional[DocumentRef]:
        return self.active

    def get_diagnostics(self, path: str) -> Sequence[Diagnostic]:
        return list(self.diagnostics.get(path, []))

    def show_information_message(self, message: str) -> None:
        self.messages.append(message)


class FakeClient:
    """Transport double that records sends and lets tests flip the link."""

    def __init__(self) -> None:
        self.up = False
        self.sent: List[Tuple[str, Any]] = []
        self.services: List[Optional[str]] = []
        self._on_connect: List[Callable[[str], None]] = []
        self._on_disconnect: List[Callable[[str], None]] = []

    def register_on_connect(self, callback: Callable[[str], None]) -> None:
        self._on_connect.append(callback)

    def register_on_disconnect(self, callback: Callable[[str], None]) -> None:
        self._on_disconnect.append(callback)

    def connect(self, service_name: Optional[str] = None) -> None:
        self.services.append(service_name)

    def send(self, topic: str, payload: Any) -> bool:
        if not self.up:
            return False
        self.sent.append((topic, payload))
        return True

    def go_up(self) -> None:
        self.up = True
        for callback in self._on_connect:
            callback("connected")

    def go_down(self) -> None:
        self.up = False
        for callback in self._on_disconnect:
            callback("disconnected")

    async def aclose(self) -> None:
        self.up = False

    def messages(self) -> List[Dict[str, Any]]:
        return [payload["message"] for _topic, payload in self.sent]


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()
