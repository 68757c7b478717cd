"""Immutable document coordinates."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """Zero-based ``(line, column)`` location inside a document."""

    line: int = 0
    column: int = 0

    def __post_init__(self) -> None:
        if self.line < 0 or self.column < 0:
            raise ValueError(
                f"Position coordinates must be non-negative, got ({self.line}, {self.column})"
            )

    def translate(self, line_delta: int = 0, column_delta: int = 0) -> "Position":
        """Return a position moved by the given deltas.

        When ``line_delta`` is non-zero, ``column_delta`` is taken as the
        absolute column on the destination line rather than an offset.
        """

        if line_delta:
            return Position(self.line + line_delta, column_delta)
        return Position(self.line, self.column + column_delta)

    def after(self, text: str) -> "Position":
        """Return the position right after ``text`` inserted here."""

        newlines = text.count("\n")
        if not newlines:
            return Position(self.line, self.column + len(text))
        tail = text.rsplit("\n", 1)[1]
        return Position(self.line + newlines, len(tail))

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


__all__ = ["Position"]
