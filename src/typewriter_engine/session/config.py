"""Process-wide playback settings, mutated only through panel toggles."""

from __future__ import annotations

from dataclasses import dataclass

from typewriter_engine.engine.marker import DEFAULT_COLOR, DEFAULT_GLYPH
from typewriter_engine.runtime.telemetry import env_flag, env_value

DEFAULT_SPEED_MS = 10


def validate_speed(value: object) -> int:
    if isinstance(value, bool):
        raise ValueError("Typing speed must be a number")
    try:
        speed = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValueError(f"Typing speed must be a number, got {value!r}") from exc
    if speed != value and not isinstance(value, str):
        raise ValueError(f"Typing speed must be a whole number, got {value!r}")
    if speed <= 0:
        raise ValueError(f"Typing speed must be positive, got {speed}")
    return speed


@dataclass(slots=True)
class Configuration:
    typing_speed_ms: int = DEFAULT_SPEED_MS
    auto_trigger_on_paste: bool = False
    marker_visible: bool = True
    marker_glyph: str = DEFAULT_GLYPH
    marker_color: str = DEFAULT_COLOR

    def __post_init__(self) -> None:
        self.typing_speed_ms = validate_speed(self.typing_speed_ms)

    @classmethod
    def from_env(cls) -> "Configuration":
        """Build a configuration from ``TYPEWRITER_ENGINE_*`` variables."""

        return cls(
            typing_speed_ms=validate_speed(env_value("SPEED_MS") or DEFAULT_SPEED_MS),
            auto_trigger_on_paste=env_flag("AUTO_TRIGGER", False),
            marker_visible=env_flag("MARKER_VISIBLE", True),
            marker_glyph=env_value("MARKER_GLYPH") or DEFAULT_GLYPH,
            marker_color=env_value("MARKER_COLOR") or DEFAULT_COLOR,
        )

    def set_speed(self, value: object) -> int:
        self.typing_speed_ms = validate_speed(value)
        return self.typing_speed_ms


__all__ = ["Configuration", "DEFAULT_SPEED_MS", "validate_speed"]
