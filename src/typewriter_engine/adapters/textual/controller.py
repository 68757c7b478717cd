"""Adapter wiring a SessionController to Textual widget callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from typewriter_engine.buffer import Position
from typewriter_engine.engine import (
    CURSOR_MOVED,
    MARKER_KEY,
    TYPING_FINISHED,
    TYPING_STARTED,
    InvalidCommand,
    TypingSession,
)
from typewriter_engine.host import MemoryHost
from typewriter_engine.session import (
    PANEL_MESSAGE,
    CommandResult,
    PanelMessage,
    SessionController,
    parse_command,
)
from typewriter_engine.session.commands import CLEAR_TEXT, STATUS, UPDATE_TABS


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class DocumentView:
    """What the document pane shows: text plus the marker, if any."""

    path: str
    text: str
    marker: Optional[Position] = None
    glyph: str = ""
    color: str = ""

    def parts(self) -> Tuple[str, str, str]:
        """Split the text around the marker: ``(before, glyph, after)``."""

        if self.marker is None:
            return self.text, "", ""
        lines = self.text.split("\n")
        line_index = min(self.marker.line, len(lines) - 1)
        line = lines[line_index]
        if self.marker.line > line_index:
            column = len(line)
        else:
            column = min(self.marker.column, len(line))
        offset = sum(len(text) + 1 for text in lines[:line_index]) + column
        return self.text[:offset], self.glyph, self.text[offset:]

    def rendered(self) -> str:
        return "".join(self.parts())


@dataclass(slots=True)
class TextualPanelHooks:
    update_document: Callable[[DocumentView], None]
    update_status: Callable[[str], None] = _noop
    update_tabs: Callable[[List[str]], None] = _noop
    clear_text: Callable[[], None] = _noop
    log: Callable[[str], None] = _noop


class TextualPanelAdapter:
    """Turns panel widget input into commands and engine events into widget updates."""

    def __init__(
        self,
        controller: SessionController,
        host: MemoryHost,
        hooks: TextualPanelHooks,
    ) -> None:
        self.controller = controller
        self.host = host
        self.hooks = hooks
        bus = controller.bus
        bus.subscribe(TYPING_STARTED, self._on_typing_started)
        bus.subscribe(TYPING_FINISHED, self._on_typing_finished)
        bus.subscribe(PANEL_MESSAGE, self._on_panel_message)
        controller.attach()
        # After attach so the marker is repainted before the view reads it.
        bus.subscribe(CURSOR_MOVED, lambda _change: self._refresh_document())
        self._refresh_document()

    async def submit(self, message: Mapping[str, Any]) -> CommandResult:
        """Parse a raw panel message and dispatch it to the controller."""

        self._log_state("panel ->", **dict(message))
        try:
            command = parse_command(message)
        except InvalidCommand as exc:
            self.hooks.update_status(str(exc))
            return CommandResult(consumed=False, status=exc.code, message=str(exc))
        result = await self.controller.dispatch(command)
        if result.message or result.status != "ok":
            self.hooks.update_status(result.message or result.status)
        self._log_state("result <-", status=result.status, message=result.message)
        return result

    def _on_typing_started(self, session: object) -> None:
        if isinstance(session, TypingSession):
            self.hooks.update_status(f"typing {len(session.text)} chars")
            self._log_state("typing ->", session=session.id)

    def _on_typing_finished(self, session: object) -> None:
        if isinstance(session, TypingSession):
            self.hooks.update_status(f"typing {session.status}")
            self._log_state(
                "typing <-", session=session.id, status=session.status
            )

    def _on_panel_message(self, message: object) -> None:
        if not isinstance(message, PanelMessage):
            return
        if message.command == CLEAR_TEXT:
            self.hooks.clear_text()
        elif message.command == UPDATE_TABS:
            self.hooks.update_tabs(list(message.payload.get("tabs", ())))
        elif message.command == STATUS:
            self.hooks.update_status(str(message.payload.get("message", "")))

    def _refresh_document(self) -> None:
        editor = self.controller.tracker.editor
        if editor is None or not self.host.is_alive(editor):
            return
        markers = self.host.decorations(editor, MARKER_KEY)
        marker = markers[0] if markers else None
        self.hooks.update_document(
            DocumentView(
                path=editor.document.path,
                text=self.host.text(editor),
                marker=marker.position if marker else None,
                glyph=marker.glyph if marker else "",
                color=marker.color if marker else "",
            )
        )

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot: Dict[str, object] = {
            "editor": getattr(self.controller.tracker.editor, "id", None),
            "busy": self.controller.engine.busy,
            "speed_ms": self.controller.config.typing_speed_ms,
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))


__all__ = ["DocumentView", "TextualPanelAdapter", "TextualPanelHooks"]
