"""Ledger access: store protocol, SQL reader and snapshot reads."""

from pool_analytics.ledger.reader import LedgerReader, SqlLedgerReader, read_ledger, require_event

__all__ = ["LedgerReader", "SqlLedgerReader", "read_ledger", "require_event"]
