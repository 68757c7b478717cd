"""In-process editor host used by tests and the Textual demo."""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from typewriter_engine.buffer import Position, TextDocument, ensure_position
from typewriter_engine.runtime import telemetry

from .protocol import (
    ActiveEditorListener,
    Decoration,
    DocumentInfo,
    EditorRef,
    SelectionListener,
    Unsubscribe,
)

PANEL_FOCUS = "panel"


@dataclass(frozen=True, slots=True)
class EditRecord:
    editor_id: str
    position: Position
    text: str


class MemoryHost:
    """Multi-document editor kept entirely in memory.

    Edits never move editor selections and never fire selection listeners;
    only :meth:`set_selection` does, which is how a user moving the caret is
    simulated.
    """

    def __init__(self, *, edit_delay: float = 0.0) -> None:
        self.edit_delay = edit_delay
        self.messages: List[str] = []
        self.edits: List[EditRecord] = []
        self.keyboard_focus: str = PANEL_FOCUS
        self._ids = itertools.count(1)
        self._documents: Dict[str, DocumentInfo] = {}
        self._contents: Dict[str, TextDocument] = {}
        self._editors: Dict[str, EditorRef] = {}
        self._visible: List[str] = []
        self._selections: Dict[str, Position] = {}
        self._decorations: Dict[Tuple[str, str], Tuple[Decoration, ...]] = {}
        self._active: Optional[str] = None
        self._selection_listeners: List[SelectionListener] = []
        self._active_listeners: List[ActiveEditorListener] = []
        self.logger = telemetry.get_logger("typewriter_engine.host")

    # -- host simulation -------------------------------------------------

    def open_document(
        self,
        path: str,
        text: str = "",
        *,
        visible: bool = True,
        activate: bool = False,
    ) -> EditorRef:
        document = DocumentInfo(id=f"doc-{next(self._ids)}", path=path)
        self._documents[document.id] = document
        self._contents[document.id] = TextDocument.from_text(text)
        editor = EditorRef(id=f"editor-{next(self._ids)}", document=document)
        self._editors[editor.id] = editor
        self._selections[editor.id] = Position()
        if visible:
            self._visible.append(editor.id)
        if activate or (visible and self._active is None):
            self.activate(editor)
        return editor

    def hide_editor(self, editor: EditorRef) -> None:
        if editor.id in self._visible:
            self._visible.remove(editor.id)

    def close_editor(self, editor: EditorRef) -> None:
        if self._editors.pop(editor.id, None) is None:
            return
        self.hide_editor(editor)
        self._selections.pop(editor.id, None)
        for key in [key for key in self._decorations if key[0] == editor.id]:
            del self._decorations[key]
        document_id = editor.document.id
        if not any(e.document.id == document_id for e in self._editors.values()):
            self._documents.pop(document_id, None)
            self._contents.pop(document_id, None)
        if self._active == editor.id:
            self._active = None
            self._notify_active(None)

    def activate(self, editor: EditorRef) -> None:
        if editor.id not in self._editors:
            raise KeyError(f"Editor '{editor.id}' is closed")
        if editor.id not in self._visible:
            self._visible.append(editor.id)
        if self._active == editor.id:
            return
        self._active = editor.id
        self._notify_active(editor)

    def set_selection(self, editor: EditorRef, position: Position) -> None:
        ensure_position(self._contents[editor.document.id], position)
        self._selections[editor.id] = position
        for listener in list(self._selection_listeners):
            listener(editor, position)

    def text(self, editor: EditorRef) -> str:
        return self._contents[editor.document.id].text

    def decorations(self, editor: EditorRef, key: str) -> Tuple[Decoration, ...]:
        return self._decorations.get((editor.id, key), ())

    # -- EditorHost --------------------------------------------------------

    def active_editor(self) -> Optional[EditorRef]:
        if self._active is None:
            return None
        return self._editors.get(self._active)

    def selection(self, editor: EditorRef) -> Position:
        return self._selections.get(editor.id, Position())

    def open_documents(self) -> Sequence[DocumentInfo]:
        return tuple(self._documents.values())

    def visible_editors(self) -> Sequence[EditorRef]:
        return tuple(self._editors[editor_id] for editor_id in self._visible)

    def is_alive(self, editor: EditorRef) -> bool:
        return editor.id in self._editors

    async def apply_insert(self, editor: EditorRef, position: Position, text: str) -> bool:
        if self.edit_delay:
            await asyncio.sleep(self.edit_delay)
        else:
            await asyncio.sleep(0)
        if not self.is_alive(editor):
            return False
        document_id = editor.document.id
        self._contents[document_id] = self._contents[document_id].insert(position, text)
        self.edits.append(EditRecord(editor.id, position, text))
        return True

    def on_selection_changed(self, listener: SelectionListener) -> Unsubscribe:
        self._selection_listeners.append(listener)
        return lambda: _discard(self._selection_listeners, listener)

    def on_active_editor_changed(self, listener: ActiveEditorListener) -> Unsubscribe:
        self._active_listeners.append(listener)
        return lambda: _discard(self._active_listeners, listener)

    def set_decorations(
        self, editor: EditorRef, key: str, decorations: Sequence[Decoration]
    ) -> None:
        if not self.is_alive(editor):
            return
        if decorations:
            self._decorations[(editor.id, key)] = tuple(decorations)
        else:
            self._decorations.pop((editor.id, key), None)

    async def focus(self, editor: EditorRef, *, preserve_focus: bool = True) -> None:
        await asyncio.sleep(0)
        self.activate(editor)
        if not preserve_focus:
            self.keyboard_focus = editor.id

    def show_information_message(self, message: str) -> None:
        self.logger.info(f"host message: {message}")
        self.messages.append(message)

    def _notify_active(self, editor: Optional[EditorRef]) -> None:
        for listener in list(self._active_listeners):
            listener(editor)


def _discard(listeners: list, listener: object) -> None:
    if listener in listeners:
        listeners.remove(listener)


__all__ = ["EditRecord", "MemoryHost", "PANEL_FOCUS"]
