"""Ledger reader: queries the store and assembles a LedgerSnapshot per event."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Protocol

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pool_analytics.db.tables.betting import BetOptionRow, BetRow, EventRow
from pool_analytics.errors import DataIntegrityError, EventNotFoundError, UpstreamUnavailableError
from pool_analytics.models import BetOption, BetRecord, EventTotals, LedgerSnapshot

log = structlog.get_logger("ledger")


class LedgerReader(Protocol):
    """Read side of the event store."""

    def get_bets(self, event_id: str) -> list[BetRecord]: ...

    def get_bets_since(self, event_id: str, since: datetime) -> list[BetRecord]: ...

    def get_options(self, event_id: str) -> list[BetOption]: ...

    def get_event_totals(self, event_id: str) -> EventTotals | None: ...


def _to_float(val: Decimal | float | None, default: float = 0.0) -> float:
    if val is None:
        return default
    return float(val)


def _as_utc(ts: datetime) -> datetime:
    """Drivers without timezone support hand back naive UTC datetimes."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _bet_from_row(row: BetRow) -> BetRecord:
    return BetRecord(
        option_id=row.option_id,
        amount=_to_float(row.amount),
        placed_at=_as_utc(row.placed_at),
        user_id=row.user_id,
    )


@contextmanager
def _store_errors(operation: str, event_id: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        log.error("ledger_read_failed", operation=operation, event_id=event_id, error=str(exc))
        raise UpstreamUnavailableError(
            f"ledger read {operation!r} failed for event {event_id!r}", event_id=event_id
        ) from exc


class SqlLedgerReader:
    """LedgerReader over the pool_betting tables.

    All reads for one reader share the session's transaction, so a
    ``read_ledger`` call sees one consistent snapshot.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_bets(self, event_id: str) -> list[BetRecord]:
        with _store_errors("get_bets", event_id):
            rows = self.session.execute(
                select(BetRow)
                .where(BetRow.event_id == event_id)
                .order_by(BetRow.placed_at, BetRow.id)
            ).scalars().all()
        return [_bet_from_row(r) for r in rows]

    def get_bets_since(self, event_id: str, since: datetime) -> list[BetRecord]:
        with _store_errors("get_bets_since", event_id):
            rows = self.session.execute(
                select(BetRow)
                .where(BetRow.event_id == event_id, BetRow.placed_at > since)
                .order_by(BetRow.placed_at, BetRow.id)
            ).scalars().all()
        return [_bet_from_row(r) for r in rows]

    def get_options(self, event_id: str) -> list[BetOption]:
        with _store_errors("get_options", event_id):
            rows = self.session.execute(
                select(BetOptionRow)
                .where(BetOptionRow.event_id == event_id)
                .order_by(BetOptionRow.label, BetOptionRow.id)
            ).scalars().all()
        return [
            BetOption(
                id=r.id,
                label=r.label,
                total_bets=_to_float(r.total_bets),
                bettors=r.bettors or 0,
            )
            for r in rows
        ]

    def get_event_totals(self, event_id: str) -> EventTotals | None:
        with _store_errors("get_event_totals", event_id):
            row = self.session.get(EventRow, event_id)
        if row is None:
            return None
        return EventTotals(
            event_id=row.id,
            title=row.title,
            status=row.status,
            total_pool=_to_float(row.total_pool),
            participant_count=row.participant_count or 0,
        )


def require_event(reader: LedgerReader, event_id: str) -> tuple[EventTotals, list[BetOption]]:
    """Fetch totals and options, failing fast on unknown events or empty option sets."""
    totals = reader.get_event_totals(event_id)
    if totals is None:
        log.warning("event_not_found", event_id=event_id)
        raise EventNotFoundError(f"event {event_id!r} not found", event_id=event_id)

    options = reader.get_options(event_id)
    if not options:
        raise DataIntegrityError(f"event {event_id!r} has no options", event_id=event_id)
    return totals, options


def read_ledger(reader: LedgerReader, event_id: str) -> LedgerSnapshot:
    """One logical read of everything the analytics pipeline needs.

    Raises:
        EventNotFoundError: no event with this id.
        DataIntegrityError: no options, or a bet references an unknown option.
        UpstreamUnavailableError: the store could not be read.
    """
    totals, options = require_event(reader, event_id)
    bets = reader.get_bets(event_id)

    known = {o.id for o in options}
    unknown = sorted({b.option_id for b in bets if b.option_id not in known})
    if unknown:
        raise DataIntegrityError(
            f"event {event_id!r} has bets on unknown options: {', '.join(unknown)}",
            event_id=event_id,
        )

    # Stable sort keeps arrival order for equal timestamps
    bets = sorted(bets, key=lambda b: b.placed_at)

    return LedgerSnapshot(totals=totals, options=options, bets=bets)
