"""Typing-simulation engine: tracker, insertion, playback, paste, marker."""

from .bus import EventBus
from .errors import (
    InvalidCommand,
    InvalidTarget,
    NoActiveEditor,
    NoVisibleEditor,
    NotFound,
    SessionBusy,
    TypewriterError,
)
from .insertion import insert_text
from .marker import MARKER_KEY, MarkerRenderer
from .paste import PasteResult, PasteRouter, paste_lines
from .tracker import CURSOR_MOVED, CursorTracker, TrackerChange
from .typing_engine import (
    TYPING_FINISHED,
    TYPING_STARTED,
    TypingEngine,
    TypingSession,
    split_indent,
)

__all__ = [
    "CURSOR_MOVED",
    "CursorTracker",
    "EventBus",
    "InvalidCommand",
    "InvalidTarget",
    "MARKER_KEY",
    "MarkerRenderer",
    "NoActiveEditor",
    "NoVisibleEditor",
    "NotFound",
    "PasteResult",
    "PasteRouter",
    "SessionBusy",
    "TYPING_FINISHED",
    "TYPING_STARTED",
    "TrackerChange",
    "TypewriterError",
    "TypingEngine",
    "TypingSession",
    "insert_text",
    "paste_lines",
    "split_indent",
]
