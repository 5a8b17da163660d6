"""Derived analytics models: buckets, data points, insights, responses."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Trend = Literal["Rising", "Falling", "Stable"]
Volatility = Literal["Low", "Medium", "High"]


class BucketPolicy(str, Enum):
    """How bets are discretised before aggregation."""

    FULL_HISTORY = "full_history"  # one bucket per occupied minute
    ROLLING_WINDOW = "rolling_window"  # fixed hourly slots up to now


class TimeBucket(BaseModel):
    """Bets falling inside ``(bucket_start, bucket_end]`` (or one minute)."""

    model_config = ConfigDict(frozen=True)

    bucket_start: datetime
    bucket_end: datetime
    increments: dict[str, float] = Field(default_factory=dict)
    bet_count: int = 0
    participants: frozenset[str] = frozenset()


class DataPoint(BaseModel):
    """One reconstructed snapshot of option shares and activity."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    percentages: dict[str, float]
    total_pool: float = 0.0
    participant_count: int = 0
    betting_velocity: int = 0
    momentum: dict[str, float] = Field(default_factory=dict)


class OptionMetadata(BaseModel):
    """An option as presented to chart consumers."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    color: str


class InsightSummary(BaseModel):
    """Scalar and categorical signals derived from one series."""

    model_config = ConfigDict(frozen=True)

    leading_option: str | None = None
    leading_option_label: str | None = None
    trend: Trend = "Stable"
    volatility: Volatility = "Low"
    volatility_score: float = Field(default=0.0, ge=0.0, le=100.0)
    peak_betting_hour: int = Field(default=0, ge=0, le=23)
    peak_betting_time: str = "0:00"
    average_velocity: float = 0.0
    trending_option: str | None = None
    trending_option_label: str | None = None
    last_major_shift: datetime | None = None


class AnalyticsResponse(BaseModel):
    """Everything a chart/summary panel needs for one event."""

    model_config = ConfigDict(frozen=True)

    event_id: str
    title: str = ""
    policy: BucketPolicy
    options: list[OptionMetadata]
    current_percentages: dict[str, float]
    total_pool: float
    participant_count: int
    historical_data: list[DataPoint]
    insights: InsightSummary
