"""Positions and text storage."""

from .document import TextDocument, split_lines
from .position import Position
from .validation import PositionOutOfRange, clamp_position, ensure_position

__all__ = [
    "Position",
    "PositionOutOfRange",
    "TextDocument",
    "clamp_position",
    "ensure_position",
    "split_lines",
]
