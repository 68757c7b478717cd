"""Session controller: owns configuration and routes panel commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from typewriter_engine.buffer import Position
from typewriter_engine.engine import (
    CURSOR_MOVED,
    CursorTracker,
    EventBus,
    InvalidCommand,
    MarkerRenderer,
    NoVisibleEditor,
    NotFound,
    PasteResult,
    PasteRouter,
    TrackerChange,
    TypewriterError,
    TypingEngine,
    TypingSession,
)
from typewriter_engine.host import EditorHost, EditorRef
from typewriter_engine.runtime import telemetry

from .commands import (
    CLEAR_TEXT,
    STATUS,
    UPDATE_TABS,
    Command,
    HandleClear,
    HandlePaste,
    PanelChannel,
    PanelMessage,
    RefreshTabs,
    RunDemo,
    SelectTab,
    SetTypingSpeed,
    ToggleArrowVisibility,
    ToggleAutoTrigger,
    TriggerTypewriter,
)
from .config import Configuration, validate_speed

PANEL_MESSAGE = "panel.message"
DEMO_TEXT = "Hello, this is a typewriter effect!"


@dataclass(slots=True)
class CommandResult:
    consumed: bool = True
    status: str = "ok"
    message: Optional[str] = None
    session: Optional[TypingSession] = None


class SessionController:
    """One per control panel: wires host events, engine, and panel commands."""

    def __init__(
        self,
        host: EditorHost,
        *,
        config: Optional[Configuration] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.host = host
        self.config = config or Configuration()
        self.bus = bus or EventBus()
        self.tracker = CursorTracker(host, bus=self.bus)
        self.engine = TypingEngine(host, self.tracker, bus=self.bus)
        self.paste_router = PasteRouter(host, self.tracker, self.engine, self.config)
        self.marker = MarkerRenderer(
            host, glyph=self.config.marker_glyph, color=self.config.marker_color
        )
        self.logger = telemetry.get_logger("typewriter_engine.session")
        self._unsubscribers: List[Callable[[], None]] = []
        self._handlers: Dict[type, Callable[[Any], Awaitable[CommandResult]]] = {
            TriggerTypewriter: self._on_trigger,
            HandlePaste: self._on_paste,
            SelectTab: self._on_select_tab,
            ToggleAutoTrigger: self._on_toggle_auto_trigger,
            SetTypingSpeed: self._on_set_speed,
            ToggleArrowVisibility: self._on_toggle_arrow,
            HandleClear: self._on_clear,
            RefreshTabs: self._on_refresh_tabs,
            RunDemo: self._on_run_demo,
        }

    # -- lifecycle ---------------------------------------------------------

    def attach(self) -> None:
        if self._unsubscribers:
            return
        self._unsubscribers = [
            self.bus.subscribe(CURSOR_MOVED, self._on_cursor_moved),
            self.host.on_selection_changed(self._on_selection_changed),
            self.host.on_active_editor_changed(self._on_active_editor_changed),
        ]
        editor = self.host.active_editor()
        if editor is not None:
            self.tracker.rebind(editor)
        self.refresh_tabs()

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        session = self.engine.active_session
        if session is not None:
            session.cancel()
        editor = self.tracker.editor
        if editor is not None and self.host.is_alive(editor):
            self.marker.clear(editor)

    # -- operations --------------------------------------------------------

    async def start_typing(self, text: str, speed: Optional[int] = None) -> TypingSession:
        editor = self._target()
        speed_ms = self.config.typing_speed_ms if speed is None else validate_speed(speed)
        return self.engine.play(editor, self.tracker.get(), text, speed_ms)

    async def paste_received(self, text: str) -> PasteResult:
        self._target()
        return await self.paste_router.on_external_paste(text)

    async def switch_tab(self, name: str) -> EditorRef:
        """Focus the first open document whose path ends with ``name``."""

        suffix = name.strip()
        document = next(
            (doc for doc in self.host.open_documents() if doc.path.endswith(suffix)),
            None,
        )
        if document is None:
            raise NotFound(f"No open document matches '{suffix}'.")
        editor = next(
            (e for e in self.host.visible_editors() if e.document.id == document.id),
            None,
        )
        if editor is None:
            raise NoVisibleEditor(f"'{document.name}' is not shown in any editor.")
        await self.host.focus(editor, preserve_focus=True)
        self.tracker.rebind(editor)
        telemetry.record_event(
            "session.tab_switch",
            data={"tab": suffix, "editor": editor.id},
            logger_name="typewriter_engine.session",
        )
        return editor

    async def run_demo(self) -> TypingSession:
        return await self.start_typing(DEMO_TEXT)

    def set_speed(self, value: object) -> int:
        return self.config.set_speed(value)

    def set_auto_trigger(self, value: bool) -> None:
        self.config.auto_trigger_on_paste = bool(value)

    def set_marker_visible(self, value: bool) -> None:
        self.config.marker_visible = bool(value)
        editor = self.tracker.editor
        if editor is not None:
            self.marker.render(editor, self.tracker.get(), self.config.marker_visible)

    def clear(self) -> None:
        self._send(PanelMessage(CLEAR_TEXT))

    def refresh_tabs(self) -> List[str]:
        tabs = [document.name for document in self.host.open_documents()]
        self._send(PanelMessage(UPDATE_TABS, {"tabs": tabs}))
        return tabs

    # -- panel protocol ----------------------------------------------------

    async def dispatch(self, command: Command) -> CommandResult:
        handler = self._handlers.get(type(command))
        name = type(command).__name__
        with telemetry.span(
            f"session::{name}",
            logger_name="typewriter_engine.session",
            component="session",
            metadata={"command": name},
        ) as handle:
            try:
                if handler is None:
                    raise InvalidCommand(f"Unsupported command {name}")
                result = await handler(command)
            except TypewriterError as exc:
                result = self._report(exc.code, str(exc))
            except ValueError as exc:
                result = self._report("invalid_value", str(exc))
            handle.add_metadata("status", result.status)
        return result

    async def serve(self, channel: PanelChannel) -> None:
        """Dispatch commands from ``channel`` until it is closed."""

        unsubscribe = self.bus.subscribe(PANEL_MESSAGE, channel.send)  # type: ignore[arg-type]
        try:
            while True:
                command = await channel.receive()
                if command is None:
                    break
                await self.dispatch(command)
        finally:
            unsubscribe()

    async def _on_trigger(self, command: TriggerTypewriter) -> CommandResult:
        session = await self.start_typing(command.text, command.speed)
        return CommandResult(status="typing", session=session)

    async def _on_paste(self, command: HandlePaste) -> CommandResult:
        result = await self.paste_received(command.text)
        return CommandResult(status=f"paste_{result.mode}", session=result.session)

    async def _on_select_tab(self, command: SelectTab) -> CommandResult:
        editor = await self.switch_tab(command.tab_name)
        return CommandResult(status="tab_selected", message=editor.document.path)

    async def _on_toggle_auto_trigger(self, command: ToggleAutoTrigger) -> CommandResult:
        self.set_auto_trigger(command.value)
        return CommandResult()

    async def _on_set_speed(self, command: SetTypingSpeed) -> CommandResult:
        speed = self.set_speed(command.value)
        return CommandResult(message=str(speed))

    async def _on_toggle_arrow(self, command: ToggleArrowVisibility) -> CommandResult:
        self.set_marker_visible(command.is_visible)
        return CommandResult()

    async def _on_clear(self, command: HandleClear) -> CommandResult:
        self.clear()
        return CommandResult(status="cleared")

    async def _on_refresh_tabs(self, command: RefreshTabs) -> CommandResult:
        tabs = self.refresh_tabs()
        return CommandResult(message=", ".join(tabs))

    async def _on_run_demo(self, command: RunDemo) -> CommandResult:
        session = await self.run_demo()
        return CommandResult(status="typing", session=session)

    # -- host events -------------------------------------------------------

    def _target(self) -> EditorRef:
        if not self.tracker.bound:
            editor = self.host.active_editor()
            if editor is not None:
                self.tracker.rebind(editor)
        return self.tracker.require_editor()

    def _on_selection_changed(self, editor: EditorRef, position: Position) -> None:
        tracked = self.tracker.editor
        active = self.host.active_editor()
        if tracked is None or tracked.id == editor.id or (
            active is not None and active.id == editor.id
        ):
            self.tracker.set(editor, position)

    def _on_active_editor_changed(self, editor: Optional[EditorRef]) -> None:
        # Focus moving to the panel reports no editor; keep the current target.
        if editor is not None:
            self.tracker.rebind(editor)
            self.refresh_tabs()

    def _on_cursor_moved(self, change: object) -> None:
        if not isinstance(change, TrackerChange):
            return
        previous = change.previous_editor
        if change.rebound and previous is not None and self.host.is_alive(previous):
            self.marker.clear(previous)
        if change.editor is not None:
            self.marker.render(change.editor, change.position, self.config.marker_visible)

    def _send(self, message: PanelMessage) -> None:
        self.bus.emit(PANEL_MESSAGE, message)

    def _report(self, status: str, message: str) -> CommandResult:
        self.host.show_information_message(message)
        self._send(PanelMessage(STATUS, {"status": status, "message": message}))
        telemetry.record_event(
            "session.command_failed",
            level="warning",
            data={"status": status, "message": message},
            logger_name="typewriter_engine.session",
        )
        return CommandResult(status=status, message=message)


__all__ = ["CommandResult", "DEMO_TEXT", "PANEL_MESSAGE", "SessionController"]
