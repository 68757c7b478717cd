"""The only code path that mutates document content."""

from __future__ import annotations

from typewriter_engine.buffer import Position
from typewriter_engine.host import EditorHost, EditorRef

from .errors import InvalidTarget


async def insert_text(
    host: EditorHost, editor: EditorRef, position: Position, text: str
) -> Position:
    """Insert ``text`` verbatim and return the position just past it."""

    if not host.is_alive(editor):
        raise InvalidTarget(f"Editor '{editor.id}' is closed", detail=editor)
    applied = await host.apply_insert(editor, position, text)
    if not applied:
        raise InvalidTarget(
            f"Edit rejected by '{editor.document.path}' at {position}", detail=editor
        )
    return position.after(text)


__all__ = ["insert_text"]
