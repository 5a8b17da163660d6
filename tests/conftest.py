"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy import BigInteger, Integer, create_engine, event
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

import pool_analytics.db.tables  # noqa: F401
from pool_analytics.db.base import Base
from pool_analytics.db.tables.betting import BetOptionRow, BetRow, EventRow


@pytest.fixture
def db_session():
    """In-memory SQLite session with all tables created.

    Strips the pool_betting schema and maps BigInteger→Integer for SQLite.
    One shared connection so the API tests can read from another thread.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, _rec):
        dbapi_conn.execute("PRAGMA foreign_keys=ON")

    for table in Base.metadata.tables.values():
        table.schema = None
        for col in table.columns:
            if isinstance(col.type, BigInteger):
                col.type = Integer()

    Base.metadata.create_all(engine)

    session = Session(engine)
    yield session
    session.close()
    engine.dispose()


class LedgerSeeder:
    """Writes events, options and bets the way the store would, keeping totals in sync."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self._users: dict[str, set[str]] = {}

    def event(
        self,
        event_id: str = "evt-1",
        options: tuple[str, ...] = ("a", "b"),
        title: str = "Championship final",
    ) -> EventRow:
        row = EventRow(id=event_id, title=title, status="open", total_pool=0, participant_count=0)
        self.session.add(row)
        self.session.flush()
        for opt in options:
            self.session.add(
                BetOptionRow(id=opt, event_id=event_id, label=opt.upper(), total_bets=0, bettors=0)
            )
        self.session.commit()
        self._users[event_id] = set()
        return row

    def bet(
        self,
        option_id: str,
        amount: float,
        placed_at: datetime,
        user_id: str = "u1",
        event_id: str = "evt-1",
        sync_totals: bool = True,
    ) -> BetRow:
        row = BetRow(
            event_id=event_id,
            option_id=option_id,
            user_id=user_id,
            amount=amount,
            placed_at=placed_at,
        )
        self.session.add(row)
        if sync_totals:
            option = self.session.get(BetOptionRow, option_id)
            if option is not None:
                option.total_bets = float(option.total_bets) + amount
                option.bettors = (option.bettors or 0) + 1
            evt = self.session.get(EventRow, event_id)
            evt.total_pool = float(evt.total_pool) + amount
            self._users.setdefault(event_id, set()).add(user_id)
            evt.participant_count = len(self._users[event_id])
        self.session.commit()
        return row


@pytest.fixture
def seed(db_session) -> LedgerSeeder:
    return LedgerSeeder(db_session)
