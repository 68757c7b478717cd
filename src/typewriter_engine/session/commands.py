"""Typed control-panel protocol and the channel it travels on."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Union

from typewriter_engine.engine.errors import InvalidCommand

from .config import validate_speed


@dataclass(frozen=True, slots=True)
class TriggerTypewriter:
    text: str
    speed: Optional[int] = None


@dataclass(frozen=True, slots=True)
class HandlePaste:
    text: str


@dataclass(frozen=True, slots=True)
class SelectTab:
    tab_name: str

    def __post_init__(self) -> None:
        if not self.tab_name.strip():
            raise InvalidCommand("selectTab requires a tab name")


@dataclass(frozen=True, slots=True)
class ToggleAutoTrigger:
    value: bool


@dataclass(frozen=True, slots=True)
class SetTypingSpeed:
    value: Any


@dataclass(frozen=True, slots=True)
class ToggleArrowVisibility:
    is_visible: bool


@dataclass(frozen=True, slots=True)
class HandleClear:
    pass


@dataclass(frozen=True, slots=True)
class RefreshTabs:
    pass


@dataclass(frozen=True, slots=True)
class RunDemo:
    pass


Command = Union[
    TriggerTypewriter,
    HandlePaste,
    SelectTab,
    ToggleAutoTrigger,
    SetTypingSpeed,
    ToggleArrowVisibility,
    HandleClear,
    RefreshTabs,
    RunDemo,
]


def _field(message: Mapping[str, Any], key: str, kind: type) -> Any:
    if key not in message:
        raise InvalidCommand(f"'{message.get('command')}' is missing '{key}'")
    value = message[key]
    if not isinstance(value, kind):
        raise InvalidCommand(
            f"'{message.get('command')}' expects '{key}' to be {kind.__name__}"
        )
    return value


def _optional_speed(message: Mapping[str, Any]) -> Optional[int]:
    speed = message.get("speed")
    if speed in (None, ""):
        return None
    if isinstance(speed, bool) or not isinstance(speed, (int, float, str)):
        raise InvalidCommand("'triggerTypewriter' expects 'speed' to be a number")
    try:
        return validate_speed(speed)
    except ValueError as exc:
        raise InvalidCommand(f"Invalid typing speed {speed!r}: {exc}") from exc


_PARSERS: Dict[str, Callable[[Mapping[str, Any]], Command]] = {
    "triggerTypewriter": lambda m: TriggerTypewriter(
        text=_field(m, "text", str), speed=_optional_speed(m)
    ),
    "handlePaste": lambda m: HandlePaste(text=_field(m, "text", str)),
    "selectTab": lambda m: SelectTab(tab_name=_field(m, "tabName", str)),
    "toggleAutoTrigger": lambda m: ToggleAutoTrigger(value=_field(m, "value", bool)),
    "setTypingSpeed": lambda m: SetTypingSpeed(value=m.get("value")),
    "toggleArrowVisibility": lambda m: ToggleArrowVisibility(
        is_visible=_field(m, "isVisible", bool)
    ),
    "handleClear": lambda m: HandleClear(),
    "refreshTabs": lambda m: RefreshTabs(),
    "runDemo": lambda m: RunDemo(),
}


def parse_command(message: Mapping[str, Any]) -> Command:
    """Turn a raw panel message (``{"command": ..., **payload}``) into a command."""

    name = message.get("command")
    parser = _PARSERS.get(name) if isinstance(name, str) else None
    if parser is None:
        raise InvalidCommand(f"Unknown panel command {name!r}")
    return parser(message)


@dataclass(frozen=True, slots=True)
class PanelMessage:
    """Message sent from the engine back to the control panel."""

    command: str
    payload: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))

    def to_dict(self) -> Dict[str, Any]:
        return {"command": self.command, **self.payload}


CLEAR_TEXT = "clearText"
UPDATE_TABS = "updateTabs"
STATUS = "status"


class PanelChannel:
    """Pair of queues: commands in from the panel, messages out to it."""

    def __init__(self) -> None:
        self.inbound: asyncio.Queue[Optional[Command]] = asyncio.Queue()
        self.outbound: asyncio.Queue[PanelMessage] = asyncio.Queue()
        self.closed = False

    def post(self, message: Union[Mapping[str, Any], Command]) -> Command:
        if self.closed:
            raise InvalidCommand("Panel channel is closed")
        command = parse_command(message) if isinstance(message, Mapping) else message
        self.inbound.put_nowait(command)
        return command

    async def receive(self) -> Optional[Command]:
        """Next command, or ``None`` once the channel has been closed."""

        return await self.inbound.get()

    def send(self, message: PanelMessage) -> None:
        self.outbound.put_nowait(message)

    def drain(self) -> list[PanelMessage]:
        messages = []
        while not self.outbound.empty():
            messages.append(self.outbound.get_nowait())
        return messages

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.inbound.put_nowait(None)


__all__ = [
    "CLEAR_TEXT",
    "Command",
    "HandleClear",
    "HandlePaste",
    "PanelChannel",
    "PanelMessage",
    "RefreshTabs",
    "RunDemo",
    "STATUS",
    "SelectTab",
    "SetTypingSpeed",
    "ToggleArrowVisibility",
    "ToggleAutoTrigger",
    "TriggerTypewriter",
    "UPDATE_TABS",
    "parse_command",
]
