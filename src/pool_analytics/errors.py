"""Analytics exception hierarchy.

- AnalyticsError: base (retryable=False)
- EventNotFoundError: event id does not resolve to an event
- DataIntegrityError: event has no options, or bets reference unknown options
- UpstreamUnavailableError: the ledger store could not be read (retryable=True)

Zero pools, single points and empty ledgers are not errors; the analytics
stages return defined defaults for those.
"""

from __future__ import annotations


class AnalyticsError(Exception):
    """Base class for all analytics failures surfaced to callers."""

    retryable: bool = False

    def __init__(self, message: str, *, event_id: str | None = None) -> None:
        super().__init__(message)
        self.event_id = event_id


class EventNotFoundError(AnalyticsError):
    """No event row matches the requested id."""


class DataIntegrityError(AnalyticsError):
    """The event exists but its data cannot produce share percentages."""


class UpstreamUnavailableError(AnalyticsError):
    """Transient store failure. The whole request can be retried."""

    retryable = True
