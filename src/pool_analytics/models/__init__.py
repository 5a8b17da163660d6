"""Pydantic domain models."""

from pool_analytics.models.analytics import (
    AnalyticsResponse,
    BucketPolicy,
    DataPoint,
    InsightSummary,
    OptionMetadata,
    TimeBucket,
    Trend,
    Volatility,
)
from pool_analytics.models.ledger import BetOption, BetRecord, EventTotals, LedgerSnapshot

__all__ = [
    "AnalyticsResponse",
    "BetOption",
    "BetRecord",
    "BucketPolicy",
    "DataPoint",
    "EventTotals",
    "InsightSummary",
    "LedgerSnapshot",
    "OptionMetadata",
    "TimeBucket",
    "Trend",
    "Volatility",
]
