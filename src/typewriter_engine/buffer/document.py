"""List-of-lines text storage backing in-process documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from .position import Position
from .validation import clamp_position


def split_lines(text: str) -> List[str]:
    """Split on ``\\n``, ``\\r\\n`` or ``\\r``; a trailing break yields an empty line."""

    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


@dataclass(slots=True)
class TextDocument:
    """Immutable-ish document: every edit returns a new, version-bumped copy."""

    _lines: List[str] = field(default_factory=lambda: [""])
    version: int = 0

    @classmethod
    def from_text(cls, text: str) -> "TextDocument":
        return cls(_lines=split_lines(text), version=0)

    def snapshot(self) -> Sequence[str]:
        return tuple(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, index: int) -> str:
        return self._lines[index]

    def insert(self, position: Position, text: str) -> "TextDocument":
        """Return a document with ``text`` inserted at ``position``.

        Out-of-range positions are clamped to the nearest valid location.
        """

        target = clamp_position(self, position)
        line = self._lines[target.line]
        head, tail = line[: target.column], line[target.column :]
        inserted = split_lines(head + text + tail)
        lines = list(self._lines)
        lines[target.line : target.line + 1] = inserted
        return TextDocument(_lines=lines, version=self.version + 1)


__all__ = ["TextDocument", "split_lines"]
