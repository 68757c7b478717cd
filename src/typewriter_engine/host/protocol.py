"""Boundary types between the engine and a host editor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Sequence

from typewriter_engine.buffer import Position


@dataclass(frozen=True, slots=True)
class DocumentInfo:
    """An open document, identified by its path."""

    id: str
    path: str

    @property
    def name(self) -> str:
        return self.path.replace("\\", "/").rsplit("/", 1)[-1]


@dataclass(frozen=True, slots=True)
class EditorRef:
    """A view onto a document. Several editors may show the same document."""

    id: str
    document: DocumentInfo


@dataclass(frozen=True, slots=True)
class Decoration:
    """Zero-width glyph painted right after ``position``."""

    position: Position
    glyph: str
    color: str


SelectionListener = Callable[[EditorRef, Position], None]
ActiveEditorListener = Callable[[Optional[EditorRef]], None]
Unsubscribe = Callable[[], None]


class EditorHost(Protocol):
    """Everything the engine needs from the editor it runs inside."""

    def active_editor(self) -> Optional[EditorRef]:
        ...

    def selection(self, editor: EditorRef) -> Position:
        """Return the active end of ``editor``'s primary selection."""
        ...

    def open_documents(self) -> Sequence[DocumentInfo]:
        """Open documents in a stable order (the order they were opened)."""
        ...

    def visible_editors(self) -> Sequence[EditorRef]:
        ...

    def is_alive(self, editor: EditorRef) -> bool:
        ...

    async def apply_insert(self, editor: EditorRef, position: Position, text: str) -> bool:
        """Insert ``text`` at ``position``; ``False`` when the host rejects the edit."""
        ...

    def on_selection_changed(self, listener: SelectionListener) -> Unsubscribe:
        ...

    def on_active_editor_changed(self, listener: ActiveEditorListener) -> Unsubscribe:
        ...

    def set_decorations(
        self, editor: EditorRef, key: str, decorations: Sequence[Decoration]
    ) -> None:
        """Replace every decoration registered under ``key`` in ``editor``."""
        ...

    async def focus(self, editor: EditorRef, *, preserve_focus: bool = True) -> None:
        """Reveal ``editor``; with ``preserve_focus`` keyboard focus stays put."""
        ...

    def show_information_message(self, message: str) -> None:
        ...


__all__ = [
    "ActiveEditorListener",
    "Decoration",
    "DocumentInfo",
    "EditorHost",
    "EditorRef",
    "SelectionListener",
    "Unsubscribe",
]
