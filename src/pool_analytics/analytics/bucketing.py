"""Time bucketing: discretise a bet ledger into fixed-width intervals.

Two policies share one entry point, :func:`bucket_bets`:

* ``FULL_HISTORY``: one bucket per UTC minute that holds at least one bet.
  Empty minutes are simply absent.
* ``ROLLING_WINDOW``: ``bucket_count`` consecutive slots ending at ``now``.
  Every slot is emitted, empty or not. A bet belongs to the slot whose
  half-open interval ``(bucket_start, bucket_end]`` contains it.

Pure functions of (bets, now, policy): no I/O, no clock reads.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta, timezone

from pool_analytics.models import BetRecord, BucketPolicy, TimeBucket

MINUTE = timedelta(minutes=1)
HOUR = timedelta(hours=1)
_TICK = timedelta(microseconds=1)


def to_utc(ts: datetime) -> datetime:
    """Normalise to aware UTC; naive values are taken to be UTC already."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def truncate_to_minute(ts: datetime) -> datetime:
    return to_utc(ts).replace(second=0, microsecond=0)


def make_bucket(start: datetime, end: datetime, bets: Iterable[BetRecord]) -> TimeBucket:
    """Sum amounts per option and collect bettors for one interval."""
    increments: dict[str, float] = {}
    participants: set[str] = set()
    count = 0
    for bet in bets:
        increments[bet.option_id] = increments.get(bet.option_id, 0.0) + bet.amount
        participants.add(bet.user_id)
        count += 1
    return TimeBucket(
        bucket_start=start,
        bucket_end=end,
        increments=increments,
        bet_count=count,
        participants=frozenset(participants),
    )


def bucket_full_history(bets: Sequence[BetRecord]) -> list[TimeBucket]:
    """One bucket per occupied minute, oldest first."""
    by_minute: dict[datetime, list[BetRecord]] = defaultdict(list)
    for bet in bets:
        by_minute[truncate_to_minute(bet.placed_at)].append(bet)
    return [make_bucket(start, start + MINUTE, by_minute[start]) for start in sorted(by_minute)]


def window_start(
    now: datetime,
    bucket_count: int = 24,
    bucket_width: timedelta = HOUR,
) -> datetime:
    return to_utc(now) - bucket_width * bucket_count


def bucket_rolling_window(
    bets: Sequence[BetRecord],
    now: datetime,
    bucket_count: int = 24,
    bucket_width: timedelta = HOUR,
) -> list[TimeBucket]:
    """Fixed slots covering ``[now - bucket_count * bucket_width, now]``.

    Bets at or before the window start and bets after ``now`` fall in no
    slot; use :func:`opening_bucket` to carry the former into aggregation.
    """
    now = to_utc(now)
    start = window_start(now, bucket_count, bucket_width)
    slots: list[list[BetRecord]] = [[] for _ in range(bucket_count)]

    for bet in bets:
        ts = to_utc(bet.placed_at)
        if ts <= start or ts > now:
            continue
        # (start + i*w, start + (i+1)*w] -> i
        slots[(ts - start - _TICK) // bucket_width].append(bet)

    return [
        make_bucket(start + bucket_width * i, start + bucket_width * (i + 1), slot)
        for i, slot in enumerate(slots)
    ]


def opening_bucket(bets: Sequence[BetRecord], cutoff: datetime) -> TimeBucket:
    """Everything staked up to and including *cutoff*, folded into one bucket.

    Seeds rolling-window aggregation so the first slot reflects the
    complete pool state, not just the bets inside the window.
    """
    cutoff = to_utc(cutoff)
    folded = [b for b in bets if to_utc(b.placed_at) <= cutoff]
    first = min((to_utc(b.placed_at) for b in folded), default=cutoff)
    return make_bucket(first, cutoff, folded)


def bucket_bets(
    bets: Sequence[BetRecord],
    policy: BucketPolicy,
    now: datetime,
    *,
    bucket_count: int = 24,
    bucket_width: timedelta = HOUR,
) -> list[TimeBucket]:
    """Dispatch to the bucketing policy."""
    if policy is BucketPolicy.FULL_HISTORY:
        return bucket_full_history(bets)
    if policy is BucketPolicy.ROLLING_WINDOW:
        return bucket_rolling_window(bets, now, bucket_count, bucket_width)
    raise ValueError(f"Unknown bucket policy: {policy!r}")
