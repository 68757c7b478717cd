"""Session controller, configuration, and the control-panel protocol."""

from .commands import (
    Command,
    HandleClear,
    HandlePaste,
    PanelChannel,
    PanelMessage,
    RefreshTabs,
    RunDemo,
    SelectTab,
    SetTypingSpeed,
    ToggleArrowVisibility,
    ToggleAutoTrigger,
    TriggerTypewriter,
    parse_command,
)
from .config import Configuration, validate_speed
from .controller import DEMO_TEXT, PANEL_MESSAGE, CommandResult, SessionController

__all__ = [
    "Command",
    "CommandResult",
    "Configuration",
    "DEMO_TEXT",
    "HandleClear",
    "HandlePaste",
    "PANEL_MESSAGE",
    "PanelChannel",
    "PanelMessage",
    "RefreshTabs",
    "RunDemo",
    "SelectTab",
    "SessionController",
    "SetTypingSpeed",
    "ToggleArrowVisibility",
    "ToggleAutoTrigger",
    "TriggerTypewriter",
    "parse_command",
    "validate_speed",
]
