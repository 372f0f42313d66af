"""Minimal synchronous publish/subscribe bus for outbound notifications."""

from typing import Any, Callable, Dict, List

BUILDING_SELECTED = "building-selected"

EventCallback = Callable[[Any], None]


class EventBus:
    def __init__(self) -> None:
        self._events: Dict[str, List[EventCallback]] = {}

    def on(self, event: str, callback: EventCallback) -> Callable[[], None]:
        """Subscribe; returns a function that removes the subscription."""
        callbacks = self._events.setdefault(event, [])
        if callback not in callbacks:
            callbacks.append(callback)
        return lambda: self.off(event, callback)

    def off(self, event: str, callback: EventCallback) -> None:
        callbacks = self._events.get(event)
        if callbacks and callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event: str, payload: Any = None) -> None:
        for callback in list(self._events.get(event, ())):
            callback(payload)

    def listener_count(self, event: str) -> int:
        return len(self._events.get(event, ()))
