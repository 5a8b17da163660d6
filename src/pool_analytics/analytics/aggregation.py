"""Cumulative aggregation: running option totals to percentage-share DataPoints."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Literal

from pool_analytics.models import DataPoint, TimeBucket


def equal_share(option_ids: Sequence[str]) -> dict[str, float]:
    """Share used when nothing has been staked yet: 100 / option count."""
    if not option_ids:
        return {}
    share = round(100.0 / len(option_ids), 2)
    return {opt: share for opt in option_ids}


def percentage_shares(totals: Mapping[str, float], option_ids: Sequence[str]) -> dict[str, float]:
    """Each option's share of the pool, 2dp, with a key for every option."""
    pool = sum(totals.get(opt, 0.0) for opt in option_ids)
    if pool <= 0:
        return equal_share(option_ids)
    return {opt: round(totals.get(opt, 0.0) / pool * 100, 2) for opt in option_ids}


def momentum_between(
    current: Mapping[str, float],
    previous: Mapping[str, float] | None,
    option_ids: Sequence[str],
) -> dict[str, float]:
    """Percentage-point change per option; all zero without a previous point."""
    if previous is None:
        return {opt: 0.0 for opt in option_ids}
    return {
        opt: round(current.get(opt, 0.0) - previous.get(opt, 0.0), 2)
        for opt in option_ids
    }


def build_series(
    buckets: Sequence[TimeBucket],
    option_ids: Sequence[str],
    *,
    opening: TimeBucket | None = None,
    timestamp_at: Literal["start", "end"] = "start",
) -> list[DataPoint]:
    """Walk buckets oldest first, emitting the pool state after each one.

    Args:
        buckets: Chronological buckets from the bucketer.
        option_ids: Every known option; each DataPoint carries all of them.
        opening: Bets preceding the first bucket. Seeds the running totals
            and participants but emits no DataPoint.
        timestamp_at: Stamp points with the bucket start (minute history)
            or end (rolling window, "as of" semantics).
    """
    running: dict[str, float] = {opt: 0.0 for opt in option_ids}
    participants: set[str] = set()

    if opening is not None:
        for opt, amount in opening.increments.items():
            running[opt] = running.get(opt, 0.0) + amount
        participants |= opening.participants

    points: list[DataPoint] = []
    previous: dict[str, float] | None = None

    for bucket in buckets:
        for opt, amount in bucket.increments.items():
            running[opt] = running.get(opt, 0.0) + amount
        participants |= bucket.participants

        percentages = percentage_shares(running, option_ids)
        points.append(
            DataPoint(
                timestamp=bucket.bucket_start if timestamp_at == "start" else bucket.bucket_end,
                percentages=percentages,
                total_pool=sum(running.get(opt, 0.0) for opt in option_ids),
                participant_count=len(participants),
                betting_velocity=bucket.bet_count,
                momentum=momentum_between(percentages, previous, option_ids),
            )
        )
        previous = percentages

    return points
