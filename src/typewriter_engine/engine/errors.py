"""Error taxonomy shared by the engine and the session controller."""

from __future__ import annotations

from typing import Optional


class TypewriterError(RuntimeError):
    """Base class; ``code`` becomes the status of a failed command."""

    code = "error"

    def __init__(self, message: str, *, detail: Optional[object] = None) -> None:
        super().__init__(message)
        self.detail = detail


class NoActiveEditor(TypewriterError):
    code = "no_active_editor"

    def __init__(self, message: str = "No active editor found!") -> None:
        super().__init__(message)


class InvalidTarget(TypewriterError):
    """The target editor or its document went away."""

    code = "invalid_target"


class SessionBusy(TypewriterError):
    code = "session_busy"

    def __init__(self, message: str = "A typing session is already running.") -> None:
        super().__init__(message)


class NotFound(TypewriterError):
    code = "not_found"


class NoVisibleEditor(TypewriterError):
    code = "no_visible_editor"


class InvalidCommand(TypewriterError):
    code = "invalid_command"


__all__ = [
    "InvalidCommand",
    "InvalidTarget",
    "NoActiveEditor",
    "NoVisibleEditor",
    "NotFound",
    "SessionBusy",
    "TypewriterError",
]
