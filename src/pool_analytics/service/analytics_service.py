"""AnalyticsService: per-request orchestration of ledger read to insights."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from typing import Any

from pool_analytics.analytics.aggregation import build_series, momentum_between, percentage_shares
from pool_analytics.analytics.bucketing import bucket_bets, opening_bucket, to_utc, window_start
from pool_analytics.analytics.cache import SnapshotCache
from pool_analytics.analytics.insights import extract_insights
from pool_analytics.analytics.smoothing import smooth_series
from pool_analytics.config.schema import AnalyticsConfig
from pool_analytics.ledger.reader import LedgerReader, read_ledger, require_event
from pool_analytics.logging import bind_event_context, get_logger
from pool_analytics.models import (
    AnalyticsResponse,
    BetOption,
    BucketPolicy,
    DataPoint,
    EventTotals,
    InsightSummary,
    LedgerSnapshot,
    OptionMetadata,
)

log = get_logger("analytics_service")


def assign_colors(options: Sequence[BetOption], palette: Sequence[str]) -> list[OptionMetadata]:
    """Colour by list position, so stable option order means stable colours."""
    return [
        OptionMetadata(id=opt.id, label=opt.label, color=palette[i % len(palette)])
        for i, opt in enumerate(options)
    ]


def _store_shares(options: Sequence[BetOption]) -> dict[str, float]:
    return percentage_shares({o.id: o.total_bets for o in options}, [o.id for o in options])


def _with_store_totals(series: list[DataPoint], totals: EventTotals) -> list[DataPoint]:
    """The store's totals win for the newest point; older points keep computed sums."""
    if not series:
        return series
    latest = series[-1].model_copy(
        update={
            "total_pool": totals.total_pool,
            "participant_count": totals.participant_count,
        }
    )
    return [*series[:-1], latest]


class AnalyticsService:
    """Entry points used by the API and the refresher.

    Holds no per-event state apart from the optional realtime snapshot
    cache; every call reads a fresh ledger snapshot through *reader*.
    """

    def __init__(
        self,
        reader: LedgerReader,
        config: AnalyticsConfig | None = None,
        snapshot_cache: SnapshotCache | None = None,
    ) -> None:
        self.reader = reader
        self.config = config or AnalyticsConfig()
        self.snapshot_cache = snapshot_cache

    # ── Policy helpers ────────────────────────────────────────

    def _resolve_policy(self, policy: BucketPolicy | str | None) -> BucketPolicy:
        return BucketPolicy(policy or self.config.bucketing.policy)

    def _shift_threshold(self, policy: BucketPolicy) -> float:
        if policy is BucketPolicy.ROLLING_WINDOW:
            return self.config.insights.hour_shift_threshold
        return self.config.insights.minute_shift_threshold

    # ── History ───────────────────────────────────────────────

    def build_history(
        self,
        snapshot: LedgerSnapshot,
        policy: BucketPolicy,
        now: datetime,
    ) -> tuple[list[DataPoint], list[DataPoint]]:
        """Bucket and accumulate one ledger snapshot.

        Returns ``(raw, display)``. Insights read the raw cumulative series;
        the display series is smoothed and carries the store totals on its
        newest point.
        """
        option_ids = snapshot.option_ids
        bucketing = self.config.bucketing

        if policy is BucketPolicy.ROLLING_WINDOW:
            width = timedelta(minutes=bucketing.rolling_bucket_minutes)
            buckets = bucket_bets(
                snapshot.bets,
                policy,
                now,
                bucket_count=bucketing.window_buckets,
                bucket_width=width,
            )
            opening = opening_bucket(
                snapshot.bets, window_start(now, bucketing.window_buckets, width)
            )
            series = build_series(buckets, option_ids, opening=opening, timestamp_at="end")
        else:
            buckets = bucket_bets(snapshot.bets, policy, now)
            series = build_series(buckets, option_ids)

        smoothed = smooth_series(series, self.config.insights.smoothing_weights)
        return series, _with_store_totals(smoothed, snapshot.totals)

    def compute_analytics(
        self,
        event_id: str,
        *,
        now: datetime | None = None,
        policy: BucketPolicy | str | None = None,
    ) -> AnalyticsResponse:
        """Full share history, options and insights for one event.

        Raises:
            EventNotFoundError, DataIntegrityError, UpstreamUnavailableError
        """
        resolved = self._resolve_policy(policy)
        now = to_utc(now) if now is not None else datetime.now(timezone.utc)
        cfg = self.config.insights

        with bind_event_context(event_id):
            snapshot = read_ledger(self.reader, event_id)
            options = assign_colors(snapshot.options, self.config.palette)
            raw, series = self.build_history(snapshot, resolved, now)
            insights = extract_insights(
                raw,
                snapshot.bets,
                options,
                major_shift_threshold=self._shift_threshold(resolved),
                trend_window=cfg.trend_window,
                trend_threshold=cfg.trend_threshold,
                volatility_medium=cfg.volatility_medium,
                volatility_high=cfg.volatility_high,
            )
            log.info(
                "analytics_computed",
                policy=resolved.value,
                bets=len(snapshot.bets),
                points=len(series),
                leading_option=insights.leading_option,
            )

        return AnalyticsResponse(
            event_id=event_id,
            title=snapshot.totals.title,
            policy=resolved,
            options=options,
            current_percentages=_store_shares(snapshot.options),
            total_pool=snapshot.totals.total_pool,
            participant_count=snapshot.totals.participant_count,
            historical_data=series,
            insights=insights,
        )

    def get_insights(
        self,
        event_id: str,
        *,
        now: datetime | None = None,
        policy: BucketPolicy | str | None = None,
    ) -> InsightSummary:
        return self.compute_analytics(event_id, now=now, policy=policy).insights

    # ── Realtime ──────────────────────────────────────────────

    def compute_realtime_snapshot(
        self,
        event_id: str,
        *,
        now: datetime | None = None,
    ) -> DataPoint:
        """Current shares plus trailing-window velocity, without rebuilding history.

        Momentum is measured against the previous cached snapshot for the
        event, or zero when there is none.
        """
        now = to_utc(now) if now is not None else datetime.now(timezone.utc)
        window = timedelta(minutes=self.config.realtime.velocity_window_minutes)

        with bind_event_context(event_id):
            totals, options = require_event(self.reader, event_id)
            option_ids = [o.id for o in options]
            recent = [
                b for b in self.reader.get_bets_since(event_id, now - window)
                if to_utc(b.placed_at) <= now
            ]
            percentages = _store_shares(options)

            previous = self.snapshot_cache.previous(event_id) if self.snapshot_cache else None
            point = DataPoint(
                timestamp=now,
                percentages=percentages,
                total_pool=totals.total_pool,
                participant_count=totals.participant_count,
                betting_velocity=len(recent),
                momentum=momentum_between(
                    percentages, previous.percentages if previous else None, option_ids
                ),
            )
            if self.snapshot_cache is not None:
                self.snapshot_cache.remember(event_id, point)

            log.debug("realtime_snapshot", velocity=point.betting_velocity, has_previous=previous is not None)
        return point

    def handle_change(self, event_id: str, payload: Any = None) -> DataPoint:
        """Trigger entry point for change notifications.

        The payload is never inspected; the store is re-read instead.
        """
        return self.compute_realtime_snapshot(event_id)
