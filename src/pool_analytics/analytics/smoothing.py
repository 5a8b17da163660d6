"""Three-point weighted moving average over share and momentum series."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from pool_analytics.models import DataPoint

DEFAULT_WEIGHTS = (0.2, 0.6, 0.2)


def _blend(
    prev: Mapping[str, float],
    cur: Mapping[str, float],
    nxt: Mapping[str, float],
    weights: tuple[float, float, float],
) -> dict[str, float]:
    w_prev, w_cur, w_next = weights
    return {
        opt: round(
            w_prev * prev.get(opt, 0.0) + w_cur * value + w_next * nxt.get(opt, 0.0),
            2,
        )
        for opt, value in cur.items()
    }


def smooth_series(
    points: Sequence[DataPoint],
    weights: tuple[float, float, float] = DEFAULT_WEIGHTS,
) -> list[DataPoint]:
    """Smooth interior percentages and momentum; endpoints pass through.

    Neighbours are always the unsmoothed input points. Pool, velocity,
    participants and timestamps are left alone. Returns a new list.
    """
    if len(points) < 3:
        return list(points)

    smoothed = [points[0]]
    for i in range(1, len(points) - 1):
        prev, cur, nxt = points[i - 1], points[i], points[i + 1]
        smoothed.append(
            cur.model_copy(
                update={
                    "percentages": _blend(prev.percentages, cur.percentages, nxt.percentages, weights),
                    "momentum": _blend(prev.momentum, cur.momentum, nxt.momentum, weights),
                }
            )
        )
    smoothed.append(points[-1])
    return smoothed
