"""Character-by-character playback of text into a host document."""

from __future__ import annotations

import asyncio
import itertools
from typing import Optional, Tuple

from typewriter_engine.buffer import Position, split_lines
from typewriter_engine.host import EditorHost, EditorRef
from typewriter_engine.runtime import telemetry

from .bus import EventBus
from .errors import InvalidTarget, SessionBusy
from .insertion import insert_text
from .tracker import CursorTracker

TYPING_STARTED = "typing.started"
TYPING_FINISHED = "typing.finished"

_session_ids = itertools.count(1)


def split_indent(line: str) -> Tuple[str, str]:
    """Split ``line`` into its leading spaces/tabs and the rest."""

    body = line.lstrip(" \t")
    return line[: len(line) - len(body)], body


class TypingSession:
    """One run of the engine, from ``play`` until it completes or is dropped."""

    def __init__(
        self,
        editor: EditorRef,
        lines: Tuple[str, ...],
        speed_ms: int,
        generation: int,
    ) -> None:
        self.id = next(_session_ids)
        self.editor = editor
        self.lines = lines
        self.speed_ms = speed_ms
        self.generation = generation
        self.status = "running"
        self.inserted = 0
        self.drop_reason: Optional[str] = None
        self.task: Optional[asyncio.Task[None]] = None

    @property
    def active(self) -> bool:
        return self.status == "running"

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def cancel(self) -> None:
        if self.task is not None and not self.task.done():
            self.task.cancel()

    async def wait(self) -> "TypingSession":
        if self.task is not None:
            try:
                await asyncio.shield(self.task)
            except asyncio.CancelledError:
                if not self.task.cancelled():
                    raise
        return self

    def __repr__(self) -> str:
        return (
            f"TypingSession(id={self.id}, editor={self.editor.id!r}, "
            f"status={self.status!r}, inserted={self.inserted})"
        )


class TypingEngine:
    """Drives insertions against a :class:`CursorTracker`, one session at a time."""

    def __init__(
        self,
        host: EditorHost,
        tracker: CursorTracker,
        *,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.host = host
        self.tracker = tracker
        self.bus = bus or tracker.bus
        self._active: Optional[TypingSession] = None
        self.logger = telemetry.get_logger("typewriter_engine.typing")

    @property
    def busy(self) -> bool:
        return self._active is not None

    @property
    def active_session(self) -> Optional[TypingSession]:
        return self._active

    def play(
        self, editor: EditorRef, start: Position, text: str, speed_ms: int
    ) -> TypingSession:
        """Start typing ``text`` at ``start``; requires a running event loop."""

        if self._active is not None:
            telemetry.record_event(
                "typing.busy",
                level="warning",
                data={"active_session": self._active.id},
                logger_name="typewriter_engine.typing",
            )
            raise SessionBusy()
        if speed_ms < 0:
            raise ValueError("speed_ms must be >= 0")

        self.tracker.set(editor, start)
        session = TypingSession(
            editor=editor,
            lines=tuple(split_lines(text)),
            speed_ms=speed_ms,
            generation=self.tracker.generation,
        )
        self._active = session
        session.task = asyncio.get_running_loop().create_task(
            self._run(session), name=f"typewriter-session-{session.id}"
        )
        session.task.add_done_callback(lambda _task: self._release(session))
        telemetry.record_event(
            "typing.start",
            data={
                "session": session.id,
                "editor": editor.id,
                "lines": len(session.lines),
                "speed_ms": speed_ms,
            },
            logger_name="typewriter_engine.typing",
        )
        self.bus.emit(TYPING_STARTED, session)
        return session

    async def _run(self, session: TypingSession) -> None:
        delay = session.speed_ms / 1000
        try:
            with telemetry.span(
                "typing::session",
                logger_name="typewriter_engine.typing",
                component="typing",
                metadata={"session": session.id, "editor": session.editor.id},
            ) as handle:
                for index, line in enumerate(session.lines):
                    if index and not await self._step(session, "\n"):
                        break
                    indent, body = split_indent(line)
                    if indent and not await self._step(session, indent):
                        break
                    for char in body:
                        await asyncio.sleep(delay)
                        if not await self._step(session, char):
                            break
                    if not session.active:
                        break
                else:
                    session.status = "completed"
                handle.add_metadata("status", session.status)
                handle.add_metadata("inserted", session.inserted)
        except asyncio.CancelledError:
            session.status = "cancelled"
            raise
        finally:
            if self._active is session:
                self._active = None
            telemetry.record_event(
                "typing.finish",
                data={
                    "session": session.id,
                    "status": session.status,
                    "inserted": session.inserted,
                },
                logger_name="typewriter_engine.typing",
            )
            self.bus.emit(TYPING_FINISHED, session)

    async def _step(self, session: TypingSession, text: str) -> bool:
        if self._is_stale(session):
            self._drop(session, self._stale_reason(session))
            return False
        position = self.tracker.get()
        try:
            end = await insert_text(self.host, session.editor, position, text)
        except InvalidTarget as exc:
            telemetry.record_event(
                "insert.invalid_target",
                level="warning",
                data={"session": session.id, "reason": str(exc)},
                logger_name="typewriter_engine.typing",
            )
            self._drop(session, "invalid target")
            return False
        session.inserted += 1
        if self._is_stale(session):
            self._drop(session, self._stale_reason(session))
            return False
        self.tracker.move_to(end)
        return True

    def _release(self, session: TypingSession) -> None:
        # A task cancelled before its first step never enters _run.
        if session.status == "running":
            session.status = "cancelled"
        if self._active is session:
            self._active = None

    def _is_stale(self, session: TypingSession) -> bool:
        editor = self.tracker.editor
        return (
            editor is None
            or editor.id != session.editor.id
            or self.tracker.generation != session.generation
            or not self.host.is_alive(session.editor)
        )

    def _stale_reason(self, session: TypingSession) -> str:
        if not self.host.is_alive(session.editor):
            return "editor closed"
        return "tracker rebound"

    def _drop(self, session: TypingSession, reason: str) -> None:
        session.status = "dropped"
        session.drop_reason = reason
        telemetry.record_event(
            "typing.drop",
            data={"session": session.id, "reason": reason},
            logger_name="typewriter_engine.typing",
        )


__all__ = [
    "TYPING_FINISHED",
    "TYPING_STARTED",
    "TypingEngine",
    "TypingSession",
    "split_indent",
]
