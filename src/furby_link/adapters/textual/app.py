"""Textual demo editor that mirrors one file to the companion service."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual.app import App, ComposeResult
    from textual.widgets import Footer, Header, Static, TextArea
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use furby_link.adapters.textual.app"
    ) from exc

from furby_link.bridge import FurbyBridge
from furby_link.commands import DISABLE, ENABLE, HELLO
from furby_link.config import LinkConfig, load_config
from furby_link.runtime import telemetry

from .controller import TextualEditorHost, TextualHostHooks, TextualLinkAdapter


class FurbyDemoApp(App[None]):
    """Single-buffer editor acting as the IDE host for the link."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#editor {
		height: 1fr;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+e", "furby_enable", "Enable linter"),
        ("ctrl+d", "furby_disable", "Disable linter"),
        ("ctrl+g", "furby_hello", "Hello"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, path: str, *, config: Optional[LinkConfig] = None) -> None:
        super().__init__()
        self.path = str(Path(path).resolve())
        self.config = config or load_config()
        self.bridge: FurbyBridge | None = None
        self.adapter: TextualLinkAdapter | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield TextArea(id="editor")
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    async def on_mount(self) -> None:
        host = TextualEditorHost(
            TextualHostHooks(show_message=self.notify, update_status=self._update_status)
        )
        self.bridge = FurbyBridge(host, config=self.config)
        self.adapter = TextualLinkAdapter(self.bridge, host)
        self.bridge.activate()

        text = _read_text(self.path)
        self.adapter.open_document(self.path, text)
        editor = self.query_one("#editor", TextArea)
        editor.load_text(text)
        editor.focus()
        self.adapter.focus(self.path)
        self.sub_title = self.path
        # Connection changes arrive without a host event.
        self.set_interval(0.5, self._refresh_status)

    async def on_unmount(self) -> None:
        self._status_widget = None
        if self.adapter:
            self.adapter.close_document(self.path)
        if self.bridge:
            await self.bridge.aclose()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self.adapter:
            self.adapter.text_changed(self.path, event.text_area.text)

    def on_text_area_selection_changed(self, event: TextArea.SelectionChanged) -> None:
        if self.adapter:
            self.adapter.selection_changed(self.path, [event.selection])

    def action_furby_enable(self) -> None:
        self._run(ENABLE)

    def action_furby_disable(self) -> None:
        self._run(DISABLE)

    def action_furby_hello(self) -> None:
        self._run(HELLO)

    def _run(self, command_id: str) -> None:
        if self.adapter:
            self.adapter.run_command(command_id)

    def _refresh_status(self) -> None:
        if self.adapter:
            self.adapter.publish_status()

    def _update_status(self, text: str) -> None:
        if self._status_widget:
            self._status_widget.update(text)


def _read_text(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return ""


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Edit a file while mirroring editor state to furby."
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=os.environ.get("FURBY_LINK_DEMO_FILE", "scratch.py"),
        help="File to open (default: scratch.py)",
    )
    parser.add_argument("--service", default=None, help="Companion service name")
    parser.add_argument(
        "--socket-root", default=None, help="Directory prefix for the socket"
    )
    parser.add_argument(
        "--no-announce",
        action="store_true",
        help="Skip the open announcement sent after each connect",
    )
    parser.add_argument(
        "--log-preset",
        choices=telemetry.PRESETS,
        default=None,
        help="Telemetry preset; console logging stays off, use FURBY_LINK_LOG_FILE",
    )
    return parser.parse_args(argv)


def configure_logging(preset: Optional[str] = None) -> None:
    """Keep telemetry off the terminal while the editor owns it."""

    telemetry.configure(preset=preset, console=False)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    configure_logging(args.log_preset)
    config = load_config().with_overrides(
        service_name=args.service,
        socket_root=args.socket_root,
        announce_path="" if args.no_announce else None,
    )
    FurbyDemoApp(args.path, config=config).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
