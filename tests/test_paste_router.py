from __future__ import annotations

import asyncio

import pytest

from typewriter_engine.buffer import Position
from typewriter_engine.engine import (
    CURSOR_MOVED,
    CursorTracker,
    NoActiveEditor,
    PasteRouter,
    SessionBusy,
    TrackerChange,
    TypingEngine,
    paste_lines,
)
from typewriter_engine.host import MemoryHost
from typewriter_engine.session import Configuration


def make_router(
    text: str, *, auto_trigger: bool
) -> tuple[MemoryHost, CursorTracker, PasteRouter]:
    host = MemoryHost()
    host.open_document("notes.txt", text)
    tracker = CursorTracker(host)
    engine = TypingEngine(host, tracker)
    config = Configuration(typing_speed_ms=1, auto_trigger_on_paste=auto_trigger)
    return host, tracker, PasteRouter(host, tracker, engine, config)


def test_paste_lines_strips_and_drops_blank_lines() -> None:
    assert paste_lines("  a \n\n \t\nb\n") == ["a", "b"]


def test_direct_paste_inserts_each_line_and_advances_one_line() -> None:
    host, tracker, router = make_router("12\n34\n56", auto_trigger=False)
    editor = host.active_editor()
    assert editor is not None
    tracker.set(editor, Position(0, 1))

    result = asyncio.run(router.on_external_paste("a\n\nb\n"))

    assert result.mode == "direct"
    assert result.lines == ["a", "b"]
    assert [(edit.position, edit.text) for edit in host.edits] == [
        (Position(0, 1), "a"),
        (Position(1, 1), "b"),
    ]
    assert host.text(editor) == "1a2\n3b4\n56"


def test_direct_paste_keeps_starting_column_known_quirk() -> None:
    # The tracker moves down a line per pasted line but never back to column 0.
    host, tracker, router = make_router("abcd\nefgh\n", auto_trigger=False)
    editor = host.active_editor()
    assert editor is not None
    tracker.set(editor, Position(0, 3))

    asyncio.run(router.on_external_paste("x\ny"))

    assert tracker.get() == Position(2, 3)
    assert host.text(editor) == "abcxd\nefgyh\n"


def test_auto_trigger_hands_full_text_to_engine() -> None:
    host, tracker, router = make_router("", auto_trigger=True)
    editor = host.active_editor()
    assert editor is not None
    tracker.set(editor, Position(0, 0))

    async def scenario() -> None:
        result = await router.on_external_paste("a\n\nb\n")
        assert result.mode == "typed"
        assert result.session is not None
        assert result.session.speed_ms == 1
        assert result.session.lines == ("a", "", "b", "")
        assert host.edits == []
        await result.session.wait()

    asyncio.run(scenario())

    assert host.text(editor) == "a\n\nb\n"


def test_paste_without_editor_raises() -> None:
    host = MemoryHost()
    tracker = CursorTracker(host)
    router = PasteRouter(host, tracker, TypingEngine(host, tracker), Configuration())

    with pytest.raises(NoActiveEditor):
        asyncio.run(router.on_external_paste("text"))


def test_direct_paste_stops_when_tracker_moves_to_another_editor() -> None:
    host = MemoryHost()
    first = host.open_document("a.txt")
    second = host.open_document("b.txt", "bbb")
    tracker = CursorTracker(host)
    engine = TypingEngine(host, tracker)
    router = PasteRouter(host, tracker, engine, Configuration())
    tracker.set(first, Position(0, 0))

    def switch_after_first_line(change: object) -> None:
        if isinstance(change, TrackerChange) and change.editor == first:
            if change.position == Position(1, 0):
                tracker.rebind(second)

    tracker.bus.subscribe(CURSOR_MOVED, switch_after_first_line)

    result = asyncio.run(router.on_external_paste("l1\nl2\nl3"))

    assert result.lines == ["l1"]
    assert host.text(first) == "l1"
    assert host.text(second) == "bbb"
    assert tracker.editor == second


def test_direct_paste_does_not_move_new_editor_cursor_after_switch() -> None:
    host = MemoryHost()
    first = host.open_document("a.txt")
    second = host.open_document("b.txt", "bbb")
    host.set_selection(second, Position(0, 3))
    tracker = CursorTracker(host)
    engine = TypingEngine(host, tracker)
    router = PasteRouter(host, tracker, engine, Configuration())
    tracker.set(first, Position(0, 0))

    async def scenario() -> list:
        paste = asyncio.get_running_loop().create_task(
            router.on_external_paste("l1\nl2")
        )
        await asyncio.sleep(0)
        tracker.rebind(second)
        result = await paste
        return result.lines

    assert asyncio.run(scenario()) == ["l1"]
    assert host.text(first) == "l1"
    assert host.text(second) == "bbb"
    assert tracker.editor == second
    assert tracker.get() == Position(0, 3)


def test_direct_paste_rejected_while_typing() -> None:
    host, tracker, router = make_router("", auto_trigger=False)
    editor = host.active_editor()
    assert editor is not None

    async def scenario() -> None:
        session = router.engine.play(editor, Position(0, 0), "abcdef", 0)
        with pytest.raises(SessionBusy):
            await router.on_external_paste("XYZ")
        await session.wait()
        assert session.status == "completed"

    asyncio.run(scenario())

    assert host.text(editor) == "abcdef"
    assert tracker.get() == Position(0, 6)
