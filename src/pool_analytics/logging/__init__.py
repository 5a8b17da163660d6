"""Structured logging."""

from pool_analytics.logging.setup import bind_event_context, get_logger, setup_logging

__all__ = ["bind_event_context", "get_logger", "setup_logging"]
