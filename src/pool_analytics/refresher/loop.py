"""RefreshLoop: recompute realtime snapshots on change triggers or a timer."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from typing import Any

import structlog

from pool_analytics.errors import AnalyticsError
from pool_analytics.models import DataPoint
from pool_analytics.refresher.notifier import ChangeNotifier

log = structlog.get_logger("refresher")

Compute = Callable[[str], DataPoint]
Publish = Callable[[str, DataPoint], None]


def log_publisher(event_id: str, point: DataPoint) -> None:
    """Default sink: emit the snapshot as a structured log line."""
    log.info(
        "refresh_published",
        event_id=event_id,
        total_pool=point.total_pool,
        velocity=point.betting_velocity,
        percentages=point.percentages,
    )


class RefreshLoop:
    """Turns change triggers into recomputations.

    Triggers for an event already waiting in the queue are coalesced. When
    no trigger arrives within ``poll_interval_s`` every watched event is
    refreshed, which covers lost notifications.
    """

    def __init__(
        self,
        compute: Compute,
        publish: Publish = log_publisher,
        *,
        poll_interval_s: float = 30.0,
    ) -> None:
        self.compute = compute
        self.publish = publish
        self.poll_interval_s = poll_interval_s
        self._pending: asyncio.Queue[str] = asyncio.Queue()
        self._queued: set[str] = set()

    def attach(self, notifier: ChangeNotifier, event_ids: Sequence[str]) -> None:
        for event_id in event_ids:
            notifier.on_change(event_id, self.trigger)

    def trigger(self, event_id: str, payload: Any = None) -> None:
        """Queue a recompute for *event_id*; the payload is ignored."""
        if event_id in self._queued:
            return
        self._queued.add(event_id)
        self._pending.put_nowait(event_id)

    @property
    def pending(self) -> int:
        return self._pending.qsize()

    def refresh(self, event_id: str) -> DataPoint | None:
        """Recompute and publish one event. Analytics errors are logged, not raised."""
        try:
            point = self.compute(event_id)
        except AnalyticsError as exc:
            log.warning(
                "refresh_failed",
                event_id=event_id,
                error=str(exc),
                error_type=type(exc).__name__,
                retryable=exc.retryable,
            )
            return None
        self.publish(event_id, point)
        return point

    async def run(self, event_ids: Sequence[str], *, max_cycles: int | None = None) -> None:
        """Serve triggers until cancelled (or for *max_cycles* wake-ups)."""
        log.info("refresher_started", events=list(event_ids), poll_interval_s=self.poll_interval_s)
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            cycles += 1
            try:
                event_id = await asyncio.wait_for(self._pending.get(), timeout=self.poll_interval_s)
            except asyncio.TimeoutError:
                targets = list(event_ids)
            else:
                self._queued.discard(event_id)
                targets = [event_id]

            for target in targets:
                try:
                    self.refresh(target)
                except Exception:
                    log.exception("refresh_error", event_id=target)
