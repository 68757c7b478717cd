"""The single authoritative insertion cursor of a session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from typewriter_engine.buffer import Position
from typewriter_engine.host import EditorHost, EditorRef
from typewriter_engine.runtime import telemetry

from .bus import EventBus
from .errors import NoActiveEditor

CURSOR_MOVED = "cursor.moved"


@dataclass(frozen=True, slots=True)
class TrackerChange:
    editor: Optional[EditorRef]
    position: Position
    previous_editor: Optional[EditorRef]
    rebound: bool


class CursorTracker:
    """Owns the target editor and the position where the next insert lands.

    ``generation`` increases whenever the tracker is pointed at a different
    editor; running typing sessions use it to notice they went stale.
    """

    def __init__(self, host: EditorHost, *, bus: Optional[EventBus] = None) -> None:
        self.host = host
        self.bus = bus or EventBus()
        self.generation = 0
        self._editor: Optional[EditorRef] = None
        self._position = Position()
        self.logger = telemetry.get_logger("typewriter_engine.tracker")

    @property
    def editor(self) -> Optional[EditorRef]:
        return self._editor

    @property
    def bound(self) -> bool:
        return self._editor is not None

    def require_editor(self) -> EditorRef:
        if self._editor is None:
            raise NoActiveEditor()
        return self._editor

    def get(self) -> Position:
        self.require_editor()
        return self._position

    def set(self, editor: EditorRef, position: Position) -> None:
        previous = self._editor
        rebound = previous is None or previous.id != editor.id
        if rebound:
            self.generation += 1
        self._editor = editor
        self._position = position
        self.bus.emit(
            CURSOR_MOVED,
            TrackerChange(
                editor=editor,
                position=position,
                previous_editor=previous,
                rebound=rebound,
            ),
        )

    def move_to(self, position: Position) -> None:
        self.set(self.require_editor(), position)

    def advance(self, line_delta: int = 0, column_delta: int = 0) -> Position:
        self.move_to(self.get().translate(line_delta, column_delta))
        return self._position

    def rebind(self, editor: EditorRef) -> None:
        """Follow ``editor`` and adopt its current selection."""

        position = self.host.selection(editor)
        self.logger.debug(f"rebind editor={editor.id} position={position}")
        self.set(editor, position)

    def unbind(self) -> None:
        previous = self._editor
        if previous is None:
            return
        self._editor = None
        self._position = Position()
        self.generation += 1
        self.bus.emit(
            CURSOR_MOVED,
            TrackerChange(
                editor=None,
                position=self._position,
                previous_editor=previous,
                rebound=True,
            ),
        )


__all__ = ["CURSOR_MOVED", "CursorTracker", "TrackerChange"]
