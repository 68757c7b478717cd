"""Logging and profiling for the typing engine, backed by telelog.

Public surface:

``configure(...)`` -- install a telelog configuration (explicit or preset)
``get_logger(name)`` -- cached logger bound to the active configuration
``record_event(name, ...)`` -- structured event at a chosen level
``span(name, ...)`` -- profiled block, optionally tracked as a component
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "TYPEWRITER_ENGINE_"
TRUTHY = frozenset({"1", "true", "yes", "on"})
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "typewriter_engine")

_loggers: MutableMapping[str, Any] = {}
_config: Optional[Any] = None


def env_value(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env_value(name)
    if raw is None:
        return default
    return raw.strip().lower() in TRUTHY


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


def _pairs(data: Dict[str, Any]) -> list[tuple[str, str]]:
    return [(str(key), _text(value)) for key, value in data.items()]


def _with_profiling(config: Any) -> Any:
    config.with_profiling(True)
    return config


def _preset(name: str) -> Any:
    config = tl.Config()
    preset = name.lower()
    if preset == "development":
        config.with_min_level("DEBUG")
        config.with_console_output(True)
        config.with_colored_output(True)
    elif preset == "quiet":
        # Used by the Textual demo: the terminal belongs to the UI.
        config.with_min_level("WARNING")
        config.with_console_output(False)
        log_file = env_value("LOG_FILE")
        if log_file:
            config.with_file_output(log_file)
    elif preset == "production":
        config.with_min_level("INFO")
        config.with_console_output(False)
        config.with_file_output(env_value("LOG_FILE") or "typewriter_engine.log")
        config.with_buffering(True)
    else:
        raise ValueError(f"Unknown telemetry preset '{name}'.")
    return _with_profiling(config)


def _from_environment() -> Any:
    config = tl.Config()
    config.with_min_level((env_value("LOG_LEVEL") or "INFO").upper())
    console = not env_flag("DISABLE_CONSOLE", False)
    config.with_console_output(console)
    if console:
        config.with_colored_output(not env_flag("NO_COLOR", False))
    if env_flag("LOG_JSON", False):
        config.with_json_format(True)
    log_file = env_value("LOG_FILE")
    if log_file:
        config.with_file_output(log_file)
    return _with_profiling(config)


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active telelog configuration.

    ``config`` adopts a ready ``telelog.Config``; ``preset`` builds one of
    ``"development"``, ``"quiet"`` or ``"production"``. With neither, the
    configuration is rebuilt from ``TYPEWRITER_ENGINE_*`` variables.
    """

    global _config
    if config is not None and preset:
        raise ValueError("Pass either `config` or `preset`.")
    if preset:
        _config = _preset(preset)
    elif config is not None:
        _config = _with_profiling(config)
    else:
        _config = _from_environment()
    _loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    key = name or DEFAULT_LOGGER_NAME
    logger = _loggers.get(key)
    if logger is None:
        if _config is None:
            configure()
        logger = tl.Logger.with_config(key, _config)
        _loggers[key] = logger
    return logger


def _level_method(logger: Any, level: Any) -> Tuple[Any, bool]:
    name = str(level).lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        return structured, True
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    return plain, False


def _emit(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    method, structured = _level_method(logger, level)
    if structured:
        method(message, _pairs(payload))
    else:
        method(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log ``event::<name>`` with ``data`` attached as key/value pairs."""

    payload = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def _payload(self, extra: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        for key, value in (extra or {}).items():
            payload[key] = _text(value)
        return payload

    def fail(self, reason: str) -> None:
        _emit(self.logger, "error", "span::fail", self._payload({"reason": reason}))

    def cancel(self, reason: Optional[str] = None) -> None:
        extra = {"reason": reason} if reason else None
        _emit(self.logger, "warning", "span::cancel", self._payload(extra))


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block with ``logger.profile``.

    ``component=True`` tracks the block as a component named ``name``; a
    string names the component explicitly. ``metadata`` is pushed as logger
    context for the duration of the block.
    """

    log = get_logger(logger_name)
    if component is True:
        component_name: Optional[str] = name
    elif isinstance(component, str):
        component_name = component
    else:
        component_name = None

    context = {key: _text(value) for key, value in (metadata or {}).items()}
    for key, value in context.items():
        log.add_context(key, value)

    handle = SpanHandle(
        logger=log,
        span_name=name,
        component_name=component_name,
        metadata=dict(context),
    )
    try:
        with ExitStack() as stack:
            if component_name:
                stack.enter_context(log.track_component(component_name))
            stack.enter_context(log.profile(name))
            try:
                yield handle
            except Exception as exc:
                handle.fail(str(exc))
                raise
    finally:
        for key in context:
            log.remove_context(key)


__all__ = [
    "SpanHandle",
    "configure",
    "env_flag",
    "env_value",
    "get_logger",
    "record_event",
    "span",
]
