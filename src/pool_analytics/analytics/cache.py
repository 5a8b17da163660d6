"""In-memory TTL cache of the last realtime snapshot per event."""

from __future__ import annotations

import time
from collections.abc import Callable

from pool_analytics.models import DataPoint


class SnapshotCache:
    """Dict + monotonic clock TTL cache. Not thread-safe."""

    def __init__(
        self,
        ttl_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._store: dict[str, tuple[float, DataPoint]] = {}

    def previous(self, event_id: str) -> DataPoint | None:
        """Return the last snapshot for *event_id*, or ``None`` if missing / expired."""
        entry = self._store.get(event_id)
        if entry is None:
            return None
        stored_at, point = entry
        if self._clock() - stored_at > self._ttl:
            del self._store[event_id]
            return None
        return point

    def remember(self, event_id: str, point: DataPoint) -> None:
        self._store[event_id] = (self._clock(), point)

    def forget(self, event_id: str) -> None:
        """Remove a single event (no-op if absent)."""
        self._store.pop(event_id, None)

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
