"""Synchronous publish/subscribe bus connecting engine components."""

from __future__ import annotations

from typing import Callable, Dict, List

Callback = Callable[[object], None]


class EventBus:
    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Callback]] = {}

    def subscribe(self, event: str, callback: Callback) -> Callable[[], None]:
        callbacks = self._subscribers.setdefault(event, [])
        callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, ())):
            callback(payload)


__all__ = ["EventBus"]
