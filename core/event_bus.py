"""Simple in-process event bus for simulator trace events."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Any

EventHandler = Callable[[dict[str, Any]], None]

ALL_EVENTS = "*"


class EventBus:
    """Dispatches events to subscribers by event name.

    Handlers subscribed to ``"*"`` see every event, with its name added to the
    payload under ``"event"``.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        """Register a callback for an event."""
        self._handlers[event_name].append(handler)

    def unsubscribe(self, event_name: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        """Emit an event to all subscribers."""
        for handler in list(self._handlers.get(event_name, [])):
            handler(payload)
        wildcard = list(self._handlers.get(ALL_EVENTS, []))
        if wildcard and event_name != ALL_EVENTS:
            tagged = {"event": event_name, **payload}
            for handler in wildcard:
                handler(tagged)
