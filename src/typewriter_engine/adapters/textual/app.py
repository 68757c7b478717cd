"""Executable Textual app: a document pane plus the typewriter control panel."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, List, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Horizontal, Vertical
    from textual.widgets import (
        Button,
        Checkbox,
        Footer,
        Header,
        Input,
        Log,
        Select,
        Static,
        TextArea,
    )
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use typewriter_engine.adapters.textual.app"
    ) from exc

from typewriter_engine.host import MemoryHost
from typewriter_engine.runtime import telemetry
from typewriter_engine.session import Configuration, SessionController

from .controller import DocumentView, TextualPanelAdapter, TextualPanelHooks

SAMPLE_DOCUMENTS = (
    ("notes.txt", ""),
    ("src/hello.py", "def main():\n    pass\n"),
)


def create_host(paths: Sequence[str] = ()) -> MemoryHost:
    """Open ``paths`` (or the sample documents) in a fresh in-memory host."""

    host = MemoryHost()
    if paths:
        for path in paths:
            host.open_document(path, Path(path).read_text(encoding="utf-8"))
    else:
        for path, text in SAMPLE_DOCUMENTS:
            host.open_document(path, text)
    return host


class TypewriterApp(App[None]):
    """Document pane on the left, control panel on the right."""

    CSS = """
	#document-view {
		width: 2fr;
		height: 1fr;
		border: round $accent;
		padding: 0 1;
		overflow: auto;
	}

	#panel {
		width: 1fr;
		padding: 0 1;
	}

	#text-input {
		height: 8;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#event-log {
		height: 6;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, host: MemoryHost, config: Configuration) -> None:
        super().__init__()
        self.host = host
        self.config = config
        self.controller: SessionController | None = None
        self.adapter: TextualPanelAdapter | None = None
        self._tabs: List[str] = []

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal():
            yield Static("", id="document-view")
            with Vertical(id="panel"):
                yield Select([], prompt="Tab", id="tab-select")
                yield TextArea(id="text-input")
                yield Input(
                    str(self.config.typing_speed_ms),
                    placeholder="Speed (ms per char)",
                    type="integer",
                    id="speed-input",
                )
                yield Checkbox(
                    "Auto-trigger on paste",
                    self.config.auto_trigger_on_paste,
                    id="auto-trigger",
                )
                yield Checkbox("Show arrow", self.config.marker_visible, id="arrow-visible")
                with Horizontal():
                    yield Button("Type", variant="primary", id="type-button")
                    yield Button("Paste", id="paste-button")
                    yield Button("Clear", variant="warning", id="clear-button")
                yield Log(id="event-log")
        yield Static("", id="status-line")
        yield Footer()

    async def on_mount(self) -> None:
        self.controller = SessionController(self.host, config=self.config)
        hooks = TextualPanelHooks(
            update_document=self._update_document,
            update_status=self._update_status,
            update_tabs=self._update_tabs,
            clear_text=self._clear_text,
            log=self._log_line,
        )
        self.adapter = TextualPanelAdapter(self.controller, self.host, hooks)

    async def on_unmount(self) -> None:
        if self.controller:
            self.controller.detach()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        text = self.query_one("#text-input", TextArea).text
        if event.button.id == "type-button":
            await self._submit(
                {"command": "triggerTypewriter", "text": text, "speed": self._speed()}
            )
        elif event.button.id == "paste-button":
            await self._submit({"command": "handlePaste", "text": text})
        elif event.button.id == "clear-button":
            await self._submit({"command": "handleClear"})

    async def on_paste(self, event: events.Paste) -> None:
        await self._submit({"command": "handlePaste", "text": event.text})
        event.stop()

    async def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        if event.checkbox.id == "auto-trigger":
            await self._submit({"command": "toggleAutoTrigger", "value": event.value})
        elif event.checkbox.id == "arrow-visible":
            await self._submit({"command": "toggleArrowVisibility", "isVisible": event.value})

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "speed-input":
            await self._submit({"command": "setTypingSpeed", "value": event.value})

    async def on_select_changed(self, event: Select.Changed) -> None:
        if event.value is not Select.BLANK:
            await self._submit({"command": "selectTab", "tabName": str(event.value)})

    async def _submit(self, message: dict[str, Any]) -> None:
        if self.adapter:
            await self.adapter.submit(message)

    def _speed(self) -> Optional[str]:
        value = self.query_one("#speed-input", Input).value.strip()
        return value or None

    def _update_document(self, view: DocumentView) -> None:
        before, glyph, after = view.parts()
        rendered = Text.assemble(before, (glyph, f"bold {view.color}" if glyph else ""), after)
        pane = self.query_one("#document-view", Static)
        pane.border_title = view.path
        pane.update(rendered)

    def _update_status(self, status: str) -> None:
        self.query_one("#status-line", Static).update(status)

    def _update_tabs(self, tabs: List[str]) -> None:
        if tabs == self._tabs:
            return
        self._tabs = list(tabs)
        self.query_one("#tab-select", Select).set_options((tab, tab) for tab in tabs)

    def _clear_text(self) -> None:
        self.query_one("#text-input", TextArea).load_text("")

    def _log_line(self, line: str) -> None:
        self.query_one("#event-log", Log).write_line(line)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    defaults = Configuration.from_env()
    parser = argparse.ArgumentParser(description="Run the typewriter engine demo.")
    parser.add_argument(
        "files",
        nargs="*",
        help="Files to open as documents (default: built-in samples)",
    )
    parser.add_argument(
        "--speed",
        type=int,
        default=defaults.typing_speed_ms,
        help=f"Delay per character in ms (default: {defaults.typing_speed_ms})",
    )
    parser.add_argument(
        "--auto-trigger",
        action="store_true",
        default=defaults.auto_trigger_on_paste,
        help="Replay pasted text through the typing engine",
    )
    parser.add_argument(
        "--hide-marker",
        action="store_true",
        default=not defaults.marker_visible,
        help="Start with the insertion arrow hidden",
    )
    parser.add_argument(
        "--log-preset",
        default="quiet",
        help="Telemetry preset while the UI owns the terminal (default: quiet)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.log_preset)
    defaults = Configuration.from_env()
    config = Configuration(
        typing_speed_ms=args.speed,
        auto_trigger_on_paste=args.auto_trigger,
        marker_visible=not args.hide_marker,
        marker_glyph=defaults.marker_glyph,
        marker_color=defaults.marker_color,
    )
    TypewriterApp(create_host(args.files), config).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
