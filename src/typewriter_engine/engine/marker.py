"""Visual marker showing where typing resumes."""

from __future__ import annotations

from typewriter_engine.buffer import Position
from typewriter_engine.host import Decoration, EditorHost, EditorRef

MARKER_KEY = "typewriter.marker"
DEFAULT_GLYPH = "←"
DEFAULT_COLOR = "#ff5f5f"


class MarkerRenderer:
    def __init__(
        self,
        host: EditorHost,
        *,
        glyph: str = DEFAULT_GLYPH,
        color: str = DEFAULT_COLOR,
    ) -> None:
        self.host = host
        self.glyph = glyph
        self.color = color

    def render(self, editor: EditorRef, position: Position, visible: bool) -> None:
        if not visible:
            self.clear(editor)
            return
        marker = Decoration(position=position, glyph=self.glyph, color=self.color)
        self.host.set_decorations(editor, MARKER_KEY, (marker,))

    def clear(self, editor: EditorRef) -> None:
        self.host.set_decorations(editor, MARKER_KEY, ())


__all__ = ["DEFAULT_COLOR", "DEFAULT_GLYPH", "MARKER_KEY", "MarkerRenderer"]
