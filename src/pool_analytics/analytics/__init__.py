"""Share-history reconstruction: bucketing, aggregation, smoothing, insights."""

from pool_analytics.analytics.aggregation import (
    build_series,
    equal_share,
    momentum_between,
    percentage_shares,
)
from pool_analytics.analytics.bucketing import (
    bucket_bets,
    bucket_full_history,
    bucket_rolling_window,
    opening_bucket,
    window_start,
)
from pool_analytics.analytics.cache import SnapshotCache
from pool_analytics.analytics.insights import (
    average_velocity,
    extract_insights,
    last_major_shift,
    leading_option,
    peak_betting_hour,
    trend,
    trending_option,
    volatility,
)
from pool_analytics.analytics.smoothing import smooth_series

__all__ = [
    "SnapshotCache",
    "average_velocity",
    "bucket_bets",
    "bucket_full_history",
    "bucket_rolling_window",
    "build_series",
    "equal_share",
    "extract_insights",
    "last_major_shift",
    "leading_option",
    "momentum_between",
    "opening_bucket",
    "peak_betting_hour",
    "percentage_shares",
    "smooth_series",
    "trend",
    "trending_option",
    "volatility",
    "window_start",
]
