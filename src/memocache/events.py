# ./src/memocache/events.py
"""Notification hub for cache change events.

Handlers are stored per event kind and called synchronously in subscription
order. Only the four cache events exist; subscribing to anything else is a
``ValueError``.

Run path: owned by ``memocache.cache.MemoCache`` (one hub per cache).
Inputs: ``CacheEvent`` members (or their string values) and callables.
Outputs: handler invocations with the event payload.
Side effects: failing handlers are logged, the remaining handlers still run.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Union


class CacheEvent(str, Enum):
    SET = "set"
    DEL = "del"
    EXPIRED = "expired"
    FLUSH = "flush"


Handler = Callable[..., Any]
EventName = Union[CacheEvent, str]


def _coerce(event: EventName) -> CacheEvent:
    try:
        return CacheEvent(event)
    except ValueError:
        raise ValueError(
            f"Unknown cache event {event!r}; expected one of "
            f"{', '.join(member.value for member in CacheEvent)}"
        ) from None


class EventHub:
    def __init__(self, logger: logging.Logger):
        self._log = logger
        self._handlers: Dict[CacheEvent, List[Handler]] = {
            member: [] for member in CacheEvent
        }

    def subscribe(self, event: EventName, handler: Handler) -> None:
        """Register ``handler``; subscribing the same handler twice calls it twice."""
        if not callable(handler):
            raise TypeError("handler must be callable")
        self._handlers[_coerce(event)].append(handler)

    def unsubscribe(self, event: EventName, handler: Handler) -> bool:
        """Remove the first registration of ``handler``; ``False`` if none."""
        handlers = self._handlers[_coerce(event)]
        try:
            handlers.remove(handler)
        except ValueError:
            return False
        return True

    def handler_count(self, event: EventName) -> int:
        return len(self._handlers[_coerce(event)])

    def emit(self, event: CacheEvent, *payload: Any) -> None:
        for handler in list(self._handlers[event]):
            try:
                handler(*payload)
            except Exception:
                self._log.error(
                    "Cache event handler failed event=%s handler=%s",
                    event.value,
                    getattr(handler, "__name__", repr(handler)),
                    exc_info=True,
                )
