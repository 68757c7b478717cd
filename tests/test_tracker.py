from __future__ import annotations

from typing import List

import pytest

from typewriter_engine.buffer import Position
from typewriter_engine.engine import (
    CURSOR_MOVED,
    CursorTracker,
    EventBus,
    NoActiveEditor,
    TrackerChange,
)
from typewriter_engine.host import MemoryHost


def make_tracker() -> tuple[MemoryHost, CursorTracker, List[TrackerChange]]:
    host = MemoryHost()
    bus = EventBus()
    changes: List[TrackerChange] = []
    bus.subscribe(CURSOR_MOVED, changes.append)  # type: ignore[arg-type]
    return host, CursorTracker(host, bus=bus), changes


def test_unbound_tracker_raises_no_active_editor() -> None:
    _host, tracker, _changes = make_tracker()

    with pytest.raises(NoActiveEditor):
        tracker.get()


def test_set_and_advance() -> None:
    host, tracker, changes = make_tracker()
    editor = host.open_document("a.txt", "hello\nworld")

    tracker.set(editor, Position(0, 1))
    assert tracker.advance(0, 2) == Position(0, 3)
    assert tracker.advance(1, 0) == Position(1, 0)

    assert tracker.get() == Position(1, 0)
    assert [change.rebound for change in changes] == [True, False, False]


def test_rebind_adopts_editor_selection_and_bumps_generation() -> None:
    host, tracker, changes = make_tracker()
    first = host.open_document("a.txt", "abc")
    second = host.open_document("b.txt", "xyz")
    host.set_selection(second, Position(0, 2))

    tracker.rebind(first)
    generation = tracker.generation
    tracker.rebind(second)

    assert tracker.editor == second
    assert tracker.get() == Position(0, 2)
    assert tracker.generation == generation + 1
    assert changes[-1].previous_editor == first


def test_rebinding_same_editor_keeps_generation() -> None:
    host, tracker, _changes = make_tracker()
    editor = host.open_document("a.txt", "abc")
    tracker.rebind(editor)
    generation = tracker.generation

    tracker.rebind(editor)

    assert tracker.generation == generation


def test_unbind_clears_editor() -> None:
    host, tracker, changes = make_tracker()
    editor = host.open_document("a.txt")
    tracker.rebind(editor)

    tracker.unbind()

    assert tracker.bound is False
    assert changes[-1].editor is None
