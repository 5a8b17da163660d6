"""Change notification boundary: who tells the refresher something moved."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Any, Protocol

import structlog

ChangeHandler = Callable[[str, Any], None]

log = structlog.get_logger("notifier")


class ChangeNotifier(Protocol):
    """Pub/sub keyed by event id. Payloads are opaque."""

    def on_change(self, event_id: str, handler: ChangeHandler) -> None: ...


class LocalChangeNotifier:
    """In-process fan-out, e.g. fed by a database trigger listener or a bet-placing route.

    Handlers run synchronously on the caller's thread, in registration order.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[ChangeHandler]] = defaultdict(list)

    def on_change(self, event_id: str, handler: ChangeHandler) -> None:
        self._handlers[event_id].append(handler)

    def remove(self, event_id: str, handler: ChangeHandler) -> None:
        handlers = self._handlers.get(event_id, [])
        if handler in handlers:
            handlers.remove(handler)

    def notify(self, event_id: str, payload: Any = None) -> int:
        """Deliver to every handler for *event_id*; returns how many ran."""
        handlers = list(self._handlers.get(event_id, []))
        for handler in handlers:
            handler(event_id, payload)
        log.debug("change_notified", event_id=event_id, handlers=len(handlers))
        return len(handlers)
