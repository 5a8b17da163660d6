"""Configuration system."""

from pool_analytics.config.loader import load_config
from pool_analytics.config.schema import AnalyticsConfig

__all__ = ["AnalyticsConfig", "load_config"]
