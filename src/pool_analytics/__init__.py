"""Betting pool analytics: share history, momentum and insights per event."""

__version__ = "0.1.0"
