"""Analytics facade."""

from pool_analytics.service.analytics_service import AnalyticsService, assign_colors

__all__ = ["AnalyticsService", "assign_colors"]
