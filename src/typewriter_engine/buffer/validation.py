"""Bounds helpers shared by documents and hosts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .position import Position

if TYPE_CHECKING:  # pragma: no cover
    from .document import TextDocument


class PositionOutOfRange(ValueError):
    """Raised when a position does not exist in a document."""

    def __init__(self, message: str, *, position: Position) -> None:
        super().__init__(message)
        self.position = position


def ensure_position(document: "TextDocument", position: Position) -> Position:
    if position.line >= document.line_count:
        raise PositionOutOfRange("Line out of range", position=position)
    if position.column > len(document.get_line(position.line)):
        raise PositionOutOfRange("Column out of range", position=position)
    return position


def clamp_position(document: "TextDocument", position: Position) -> Position:
    """Map ``position`` onto the document the way editors validate positions."""

    last = document.line_count - 1
    if position.line > last:
        return Position(last, len(document.get_line(last)))
    length = len(document.get_line(position.line))
    if position.column > length:
        return Position(position.line, length)
    return position


__all__ = ["PositionOutOfRange", "ensure_position", "clamp_position"]
