from __future__ import annotations

from typing import List

from textual.widgets.text_area import Selection

from furby_link.adapters.textual import (
    TextualEditorHost,
    TextualHostHooks,
    TextualLinkAdapter,
)
from furby_link.adapters.textual import app as demo_app
from furby_link.adapters.textual.controller import (
    diff_edit,
    offset_to_location,
    syntax_diagnostics,
)
from furby_link.bridge import FurbyBridge
from furby_link.commands import DISABLE, HELLO, HELLO_MESSAGE
from furby_link.config import LinkConfig
from furby_link.events import DiagnosticSeverity
from furby_link.state import Position

PATH = "/work/demo.py"


def make_adapter(client, messages: List[str] | None = None) -> TextualLinkAdapter:
    sink = messages if messages is not None else []
    host = TextualEditorHost(TextualHostHooks(show_message=sink.append))
    bridge = FurbyBridge(host, config=LinkConfig(announce_path=""), client=client)
    client.go_up()
    return TextualLinkAdapter(bridge, host)


def test_offset_to_location_counts_lines() -> None:
    text = "ab\ncde\n"

    assert offset_to_location(text, 0) == (0, 0)
    assert offset_to_location(text, 4) == (1, 1)
    assert offset_to_location(text, len(text)) == (2, 0)


def test_diff_edit_describes_single_replacement() -> None:
    change = diff_edit("x = 1\ny = 2\n", "x = 1\ny = 42\n")

    assert change is not None
    assert change.text == "4"
    assert change.range.start == Position(1, 4)
    assert change.range.is_empty


def test_diff_edit_describes_deletion() -> None:
    change = diff_edit("hello world", "hello")

    assert change is not None
    assert change.text == ""
    assert change.range.start == Position(0, 5)
    assert change.range.end == Position(0, 11)


def test_diff_edit_of_identical_text_is_none() -> None:
    assert diff_edit("same", "same") is None


def test_syntax_diagnostics_flags_errors_and_long_lines() -> None:
    text = "def broken(:\n    pass\n" + "x = '" + "a" * 120 + "'\n"

    diagnostics = syntax_diagnostics(PATH, text)

    severities = sorted(d.severity for d in diagnostics)
    assert severities == [DiagnosticSeverity.ERROR, DiagnosticSeverity.WARNING]
    assert syntax_diagnostics("/work/notes.txt", "def broken(:\n") == ()


def test_open_and_focus_mirror_open_active_and_status(client) -> None:
    adapter = make_adapter(client)

    adapter.open_document(PATH, "value = (\n")
    adapter.focus(PATH)

    assert client.messages() == [
        {"type": "open", "path": PATH},
        {"type": "active", "path": PATH},
        {"type": "linter", "count": 1, "errors": 1, "warnings": 0},
    ]


def test_selection_changes_become_cursor_moves(client) -> None:
    adapter = make_adapter(client)
    adapter.open_document(PATH, "a = 1\nb = 2\n")
    adapter.focus(PATH)
    client.sent.clear()

    adapter.selection_changed(PATH, [Selection.cursor((1, 2))])
    adapter.selection_changed(PATH, [Selection((0, 0), (1, 3))])
    adapter.selection_changed(PATH, [Selection.cursor((0, 4))])

    assert client.messages() == [
        {
            "type": "cursor",
            "previous": {"line": 1, "character": 2},
            "current": {"line": 1, "character": 2},
        },
        {
            "type": "cursor",
            "previous": {"line": 1, "character": 2},
            "current": {"line": 0, "character": 4},
        },
    ]


def test_text_changes_emit_change_and_fresh_diagnostics(client) -> None:
    adapter = make_adapter(client)
    adapter.open_document(PATH, "a = 1\n")
    adapter.focus(PATH)
    client.sent.clear()

    adapter.text_changed(PATH, "a = 1\nb = (\n")

    assert client.messages() == [
        {"type": "change", "change": "b = (\n", "line": "b = ("},
        {"type": "linter", "count": 0, "errors": 0, "warnings": 0},
        {"type": "linter", "count": 1, "errors": 1, "warnings": 0},
    ]


def test_unchanged_text_is_not_reported(client) -> None:
    adapter = make_adapter(client)
    adapter.open_document(PATH, "a = 1\n")
    adapter.focus(PATH)
    client.sent.clear()

    assert adapter.text_changed(PATH, "a = 1\n") == []
    assert client.sent == []


def test_close_clears_focus_and_reports_close(client) -> None:
    adapter = make_adapter(client)
    adapter.open_document(PATH, "")
    adapter.focus(PATH)
    client.sent.clear()

    adapter.close_document(PATH)

    assert adapter.host.active_path is None
    assert client.messages() == [{"type": "close", "path": PATH}]


def test_malformed_selection_is_dropped(client) -> None:
    adapter = make_adapter(client)
    adapter.open_document(PATH, "")
    adapter.focus(PATH)

    assert adapter.selection_changed(PATH, [Selection.cursor((-1, 0))]) == []


def test_hello_command_reaches_ui_and_status_line(client) -> None:
    messages: List[str] = []
    adapter = make_adapter(client, messages)
    adapter.open_document(PATH, "value = (\n")
    adapter.focus(PATH)

    adapter.run_command(HELLO)

    assert messages == [HELLO_MESSAGE]
    assert adapter.status_line() == "furby: connected | linter on | E1 W0"


def test_status_hook_follows_dispatch_and_commands(client) -> None:
    statuses: List[str] = []
    host = TextualEditorHost(TextualHostHooks(update_status=statuses.append))
    bridge = FurbyBridge(host, config=LinkConfig(announce_path=""), client=client)
    client.go_up()
    adapter = TextualLinkAdapter(bridge, host)

    adapter.open_document(PATH, "value = (\n")
    adapter.focus(PATH)
    assert statuses[-1] == "furby: connected | linter on | E1 W0"

    adapter.run_command(DISABLE)
    assert statuses[-1] == "furby: connected | linter off | E1 W0"


def test_demo_logging_never_uses_the_console(monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(
        demo_app.telemetry, "configure", lambda **kwargs: calls.append(kwargs)
    )

    demo_app.configure_logging()
    demo_app.configure_logging("development")

    assert calls == [
        {"preset": None, "console": False},
        {"preset": "development", "console": False},
    ]
