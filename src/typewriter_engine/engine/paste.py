"""Routing of externally pasted text."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Protocol

from typewriter_engine.buffer import Position, split_lines
from typewriter_engine.host import EditorHost, EditorRef
from typewriter_engine.runtime import telemetry

from .errors import InvalidTarget, SessionBusy
from .insertion import insert_text
from .tracker import CursorTracker
from .typing_engine import TypingEngine, TypingSession


class PasteSettings(Protocol):
    typing_speed_ms: int
    auto_trigger_on_paste: bool


@dataclass(slots=True)
class PasteResult:
    mode: Literal["direct", "typed"]
    lines: List[str] = field(default_factory=list)
    session: Optional[TypingSession] = None


def paste_lines(raw_text: str) -> List[str]:
    """Stripped lines of ``raw_text``; blank lines are dropped."""

    return [line.strip() for line in split_lines(raw_text) if line.strip()]


class PasteRouter:
    """Sends pasted text either straight into the document or through the engine."""

    def __init__(
        self,
        host: EditorHost,
        tracker: CursorTracker,
        engine: TypingEngine,
        settings: PasteSettings,
    ) -> None:
        self.host = host
        self.tracker = tracker
        self.engine = engine
        self.settings = settings
        self.logger = telemetry.get_logger("typewriter_engine.paste")

    async def on_external_paste(self, raw_text: str) -> PasteResult:
        editor = self.tracker.require_editor()
        if self.settings.auto_trigger_on_paste:
            session = self.engine.play(
                editor, self.tracker.get(), raw_text, self.settings.typing_speed_ms
            )
            telemetry.record_event(
                "paste.typed",
                data={"session": session.id, "length": len(raw_text)},
                logger_name="typewriter_engine.paste",
            )
            return PasteResult(mode="typed", lines=list(session.lines), session=session)

        if self.engine.busy:
            raise SessionBusy()
        generation = self.tracker.generation
        inserted: List[str] = []
        for line in paste_lines(raw_text):
            if self._is_stale(editor, generation):
                break
            position = self.tracker.get()
            try:
                await insert_text(self.host, editor, position, line)
            except InvalidTarget as exc:
                self.logger.warning(f"paste dropped: {exc}")
                break
            inserted.append(line)
            if self._is_stale(editor, generation):
                break
            # Only the line moves; the column stays where the paste started.
            self.tracker.move_to(Position(position.line + 1, position.column))
        telemetry.record_event(
            "paste.direct",
            data={"lines": len(inserted)},
            logger_name="typewriter_engine.paste",
        )
        return PasteResult(mode="direct", lines=inserted)

    def _is_stale(self, editor: EditorRef, generation: int) -> bool:
        current = self.tracker.editor
        stale = (
            current is None
            or current.id != editor.id
            or self.tracker.generation != generation
        )
        if stale:
            self.logger.info(f"paste dropped: tracker left editor={editor.id}")
        return stale


__all__ = ["PasteResult", "PasteRouter", "PasteSettings", "paste_lines"]
