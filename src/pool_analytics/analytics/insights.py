"""Insight extraction: scalar and categorical signals from a share series.

Every signal is computed by its own function with a defined default for
degenerate input (no bets, no points, one point), so one empty signal
never stops the others from being reported.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

import numpy as np

from pool_analytics.analytics.bucketing import to_utc
from pool_analytics.models import (
    BetRecord,
    DataPoint,
    InsightSummary,
    OptionMetadata,
    Trend,
    Volatility,
)


def _first_max(options: Sequence[OptionMetadata], score: dict[str, float]) -> OptionMetadata:
    """Highest-scoring option; ties go to the earliest in list order."""
    best = options[0]
    for opt in options[1:]:
        if score.get(opt.id, 0.0) > score.get(best.id, 0.0):
            best = opt
    return best


def leading_option(
    bets: Sequence[BetRecord],
    options: Sequence[OptionMetadata],
    series: Sequence[DataPoint] = (),
) -> OptionMetadata | None:
    """Option with the most money staked on it.

    Falls back to the highest share in the final point when the ledger is
    empty, and to the first option when there is no series either.
    """
    if not options:
        return None
    staked: dict[str, float] = {opt.id: 0.0 for opt in options}
    for bet in bets:
        if bet.option_id in staked:
            staked[bet.option_id] += bet.amount
    if any(v > 0 for v in staked.values()):
        return _first_max(options, staked)
    if series:
        return _first_max(options, series[-1].percentages)
    return options[0]


def trend(
    series: Sequence[DataPoint],
    option_id: str | None,
    window: int = 3,
    threshold: float = 2.0,
) -> Trend:
    """Direction of *option_id*'s share over the last *window* points."""
    if option_id is None or len(series) < 2:
        return "Stable"
    recent = series[-window:]
    change = recent[-1].percentages.get(option_id, 0.0) - recent[0].percentages.get(option_id, 0.0)
    if change > threshold:
        return "Rising"
    if change < -threshold:
        return "Falling"
    return "Stable"


def volatility(
    series: Sequence[DataPoint],
    option_id: str | None,
    medium: float = 5.0,
    high: float = 10.0,
) -> tuple[Volatility, float]:
    """Classify mean absolute point-to-point share change; score is 0-100."""
    if option_id is None or len(series) < 2:
        return "Low", 0.0
    values = np.array([p.percentages.get(option_id, 0.0) for p in series], dtype=np.float64)
    avg_delta = float(np.mean(np.abs(np.diff(values))))
    score = round(min(100.0, avg_delta * 10), 2)
    if avg_delta > high:
        return "High", score
    if avg_delta > medium:
        return "Medium", score
    return "Low", score


def peak_betting_hour(bets: Sequence[BetRecord]) -> int:
    """UTC hour of day (0-23) with the most bets; ties go to the earliest hour."""
    if not bets:
        return 0
    counts = np.bincount([to_utc(bet.placed_at).hour for bet in bets], minlength=24)
    # argmax returns the first maximum
    return int(np.argmax(counts))


def trending_option(
    series: Sequence[DataPoint],
    options: Sequence[OptionMetadata],
) -> OptionMetadata | None:
    """Option with the strongest momentum in the final point."""
    if not options:
        return None
    if not series:
        return options[0]
    return _first_max(options, series[-1].momentum)


def last_major_shift(series: Sequence[DataPoint], threshold: float) -> datetime | None:
    """Timestamp of the newest point where any share moved more than *threshold*."""
    for i in range(len(series) - 1, 0, -1):
        current = series[i].percentages
        previous = series[i - 1].percentages
        for opt in current.keys() | previous.keys():
            if abs(current.get(opt, 0.0) - previous.get(opt, 0.0)) > threshold:
                return series[i].timestamp
    return None


def average_velocity(series: Sequence[DataPoint]) -> float:
    """Mean bets per bucket."""
    if not series:
        return 0.0
    return round(float(np.mean([p.betting_velocity for p in series])), 2)


def extract_insights(
    series: Sequence[DataPoint],
    bets: Sequence[BetRecord],
    options: Sequence[OptionMetadata],
    *,
    major_shift_threshold: float = 5.0,
    trend_window: int = 3,
    trend_threshold: float = 2.0,
    volatility_medium: float = 5.0,
    volatility_high: float = 10.0,
) -> InsightSummary:
    """Assemble the InsightSummary for one unsmoothed cumulative series."""
    leader = leading_option(bets, options, series)
    leader_id = leader.id if leader else None
    vol_label, vol_score = volatility(series, leader_id, volatility_medium, volatility_high)
    peak_hour = peak_betting_hour(bets)
    trending = trending_option(series, options)

    return InsightSummary(
        leading_option=leader_id,
        leading_option_label=leader.label if leader else None,
        trend=trend(series, leader_id, trend_window, trend_threshold),
        volatility=vol_label,
        volatility_score=vol_score,
        peak_betting_hour=peak_hour,
        peak_betting_time=f"{peak_hour}:00",
        average_velocity=average_velocity(series),
        trending_option=trending.id if trending else None,
        trending_option_label=trending.label if trending else None,
        last_major_shift=last_major_shift(series, major_shift_threshold),
    )
