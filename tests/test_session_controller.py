from __future__ import annotations

import asyncio
from typing import List

from typewriter_engine.buffer import Position
from typewriter_engine.engine import MARKER_KEY
from typewriter_engine.host import MemoryHost
from typewriter_engine.host.memory import PANEL_FOCUS
from typewriter_engine.session import (
    DEMO_TEXT,
    PANEL_MESSAGE,
    Configuration,
    HandleClear,
    HandlePaste,
    PanelChannel,
    PanelMessage,
    SelectTab,
    SessionController,
    SetTypingSpeed,
    ToggleArrowVisibility,
    ToggleAutoTrigger,
    TriggerTypewriter,
)


def make_controller(*paths: str) -> tuple[MemoryHost, SessionController]:
    host = MemoryHost()
    for path in paths or ("notes.txt",):
        host.open_document(path)
    controller = SessionController(host, config=Configuration(typing_speed_ms=1))
    controller.attach()
    return host, controller


def test_attach_binds_active_editor_and_paints_marker() -> None:
    host, controller = make_controller("notes.txt")
    editor = host.active_editor()
    assert editor is not None

    assert controller.tracker.editor == editor
    assert [m.position for m in host.decorations(editor, MARKER_KEY)] == [Position(0, 0)]


def test_trigger_types_text_and_marker_follows() -> None:
    host, controller = make_controller()
    editor = host.active_editor()
    assert editor is not None

    async def scenario() -> None:
        result = await controller.dispatch(TriggerTypewriter(text="hi there"))
        assert result.status == "typing"
        assert result.session is not None
        await result.session.wait()

    asyncio.run(scenario())

    assert host.text(editor) == "hi there"
    assert [m.position for m in host.decorations(editor, MARKER_KEY)] == [Position(0, 8)]


def test_trigger_while_busy_reports_session_busy() -> None:
    host, controller = make_controller()
    editor = host.active_editor()
    assert editor is not None

    async def scenario() -> None:
        first = await controller.dispatch(TriggerTypewriter(text="one"))
        second = await controller.dispatch(TriggerTypewriter(text="two"))
        assert second.status == "session_busy"
        assert first.session is not None
        await first.session.wait()

    asyncio.run(scenario())

    assert host.text(editor) == "one"
    assert host.messages == ["A typing session is already running."]


def test_trigger_without_editor_reports_no_active_editor() -> None:
    host = MemoryHost()
    controller = SessionController(host)
    controller.attach()

    result = asyncio.run(controller.dispatch(TriggerTypewriter(text="x")))

    assert result.status == "no_active_editor"
    assert host.messages == ["No active editor found!"]


def test_switch_tab_not_found_leaves_tracker_unchanged() -> None:
    host, controller = make_controller("notes.txt", "src/main.py")
    before = (controller.tracker.editor, controller.tracker.get())

    result = asyncio.run(controller.dispatch(SelectTab(tab_name="missing.rs")))

    assert result.status == "not_found"
    assert (controller.tracker.editor, controller.tracker.get()) == before
    assert host.messages


def test_switch_tab_by_suffix_rebinds_without_stealing_focus() -> None:
    host, controller = make_controller("notes.txt", "src/main.py")
    target = host.visible_editors()[1]
    asyncio.run(host.apply_insert(target, Position(0, 0), "print()"))
    host.set_selection(target, Position(0, 6))

    result = asyncio.run(controller.dispatch(SelectTab(tab_name="main.py")))

    assert result.status == "tab_selected"
    assert controller.tracker.editor == target
    assert controller.tracker.get() == Position(0, 6)
    assert host.keyboard_focus == PANEL_FOCUS
    first = host.visible_editors()[0]
    assert host.decorations(first, MARKER_KEY) == ()


def test_switch_tab_ambiguous_suffix_picks_first_opened() -> None:
    host, controller = make_controller("a/util.py", "b/util.py")
    first = host.visible_editors()[0]
    controller.tracker.rebind(host.visible_editors()[1])

    editor = asyncio.run(controller.switch_tab("util.py"))

    assert editor == first


def test_switch_tab_without_visible_editor() -> None:
    host, controller = make_controller("notes.txt", "hidden.txt")
    host.hide_editor(host.visible_editors()[1])

    result = asyncio.run(controller.dispatch(SelectTab(tab_name="hidden.txt")))

    assert result.status == "no_visible_editor"
    assert controller.tracker.editor == host.visible_editors()[0]


def test_tab_switch_cancels_running_session() -> None:
    host, controller = make_controller("notes.txt", "other.txt")
    notes, other = host.visible_editors()

    async def scenario() -> str:
        result = await controller.dispatch(TriggerTypewriter(text="abcdefgh"))
        session = result.session
        assert session is not None
        while session.inserted < 2:
            await asyncio.sleep(0)
        await controller.dispatch(SelectTab(tab_name="other.txt"))
        await session.wait()
        return session.status

    assert asyncio.run(scenario()) == "dropped"
    assert host.text(other) == ""
    assert 2 <= len(host.text(notes)) < 8


def test_paste_routing_follows_auto_trigger_toggle() -> None:
    host, controller = make_controller()
    editor = host.active_editor()
    assert editor is not None

    async def scenario() -> None:
        direct = await controller.dispatch(HandlePaste(text="one\n\n"))
        assert direct.status == "paste_direct"
        await controller.dispatch(ToggleAutoTrigger(value=True))
        typed = await controller.dispatch(HandlePaste(text="two"))
        assert typed.status == "paste_typed"
        assert typed.session is not None
        await typed.session.wait()

    asyncio.run(scenario())

    assert controller.config.auto_trigger_on_paste is True
    assert host.text(editor) == "onetwo"


def test_selection_change_moves_tracker_and_marker() -> None:
    host, controller = make_controller()
    editor = host.active_editor()
    assert editor is not None
    asyncio.run(host.apply_insert(editor, Position(0, 0), "hello"))

    host.set_selection(editor, Position(0, 3))

    assert controller.tracker.get() == Position(0, 3)
    assert [m.position for m in host.decorations(editor, MARKER_KEY)] == [Position(0, 3)]


def test_no_active_editor_event_keeps_tracker_bound() -> None:
    host, controller = make_controller("notes.txt")
    editor = host.active_editor()
    assert editor is not None

    host.close_editor(editor)

    assert host.active_editor() is None
    assert controller.tracker.editor == editor


def test_marker_visibility_toggle() -> None:
    host, controller = make_controller()
    editor = host.active_editor()
    assert editor is not None

    asyncio.run(controller.dispatch(ToggleArrowVisibility(is_visible=False)))
    assert host.decorations(editor, MARKER_KEY) == ()

    asyncio.run(controller.dispatch(ToggleArrowVisibility(is_visible=True)))
    assert len(host.decorations(editor, MARKER_KEY)) == 1


def test_invalid_speed_is_reported() -> None:
    host, controller = make_controller()

    bad = asyncio.run(controller.dispatch(SetTypingSpeed(value=0)))
    good = asyncio.run(controller.dispatch(SetTypingSpeed(value="30")))

    assert bad.status == "invalid_value"
    assert good.status == "ok"
    assert controller.config.typing_speed_ms == 30
    assert len(host.messages) == 1


def test_serve_forwards_outbound_messages() -> None:
    host, controller = make_controller("notes.txt", "main.py")

    async def scenario() -> List[PanelMessage]:
        channel = PanelChannel()
        channel.post({"command": "handleClear"})
        channel.post({"command": "refreshTabs"})
        channel.post({"command": "selectTab", "tabName": "nope"})
        channel.close()
        await controller.serve(channel)
        return channel.drain()

    messages = asyncio.run(scenario())

    assert [m.command for m in messages] == ["clearText", "updateTabs", "status"]
    assert messages[1].payload["tabs"] == ["notes.txt", "main.py"]
    assert messages[2].payload["status"] == "not_found"


def test_clear_emits_clear_text() -> None:
    _host, controller = make_controller()
    sent: List[object] = []
    controller.bus.subscribe(PANEL_MESSAGE, sent.append)

    asyncio.run(controller.dispatch(HandleClear()))

    assert sent == [PanelMessage("clearText")]


def test_run_demo_types_demo_text() -> None:
    host, controller = make_controller()
    editor = host.active_editor()
    assert editor is not None

    async def scenario() -> None:
        result = await controller.run_demo()
        await result.wait()

    asyncio.run(scenario())

    assert host.text(editor) == DEMO_TEXT


def test_detach_cancels_session_and_clears_marker() -> None:
    host, controller = make_controller()
    editor = host.active_editor()
    assert editor is not None

    async def scenario() -> str:
        session = await controller.start_typing("abcdef", speed=50)
        controller.detach()
        await session.wait()
        return session.status

    assert asyncio.run(scenario()) == "cancelled"
    assert host.decorations(editor, MARKER_KEY) == ()


def test_serve_survives_non_finite_speed() -> None:
    host, controller = make_controller()

    async def scenario() -> List[PanelMessage]:
        channel = PanelChannel()
        channel.post(SetTypingSpeed(value=float("inf")))
        channel.post(HandleClear())
        channel.close()
        await controller.serve(channel)
        return channel.drain()

    messages = asyncio.run(scenario())

    assert [m.command for m in messages] == ["status", "clearText"]
    assert messages[0].payload["status"] == "invalid_value"
    assert controller.config.typing_speed_ms == 1
    assert host.messages


def test_direct_paste_while_typing_reports_busy() -> None:
    host, controller = make_controller()
    editor = host.active_editor()
    assert editor is not None

    async def scenario() -> str:
        typing = await controller.dispatch(TriggerTypewriter(text="abcdef", speed=1))
        assert typing.session is not None
        pasted = await controller.dispatch(HandlePaste(text="XYZ"))
        await typing.session.wait()
        assert typing.session.status == "completed"
        return pasted.status

    assert asyncio.run(scenario()) == "session_busy"
    assert host.text(editor) == "abcdef"
