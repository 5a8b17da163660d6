"""Import all table modules so Base.metadata knows about them."""

from pool_analytics.db.tables.betting import BetOptionRow, BetRow, EventRow

__all__ = ["BetOptionRow", "BetRow", "EventRow"]
