"""Database engine and ledger snapshot sessions."""

from __future__ import annotations

from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

# Bets, options and totals read in one snapshot must agree with each other
SNAPSHOT_ISOLATION = "REPEATABLE READ"

_engine: Engine | None = None
_SessionLocal: sessionmaker[Session] | None = None
_snapshot_isolation: str | None = SNAPSHOT_ISOLATION


def _ensure_psycopg_driver(url: str) -> str:
    """Rewrite postgresql:// to postgresql+psycopg:// for psycopg v3."""
    if url.startswith("postgresql://"):
        return "postgresql+psycopg://" + url[len("postgresql://"):]
    return url


def init_engine(
    url: str,
    *,
    snapshot_isolation: str | None = SNAPSHOT_ISOLATION,
    **kwargs,
) -> Engine:
    """Create the global engine and session factory.

    Args:
        url: SQLAlchemy URL; plain ``postgresql://`` is routed to psycopg.
        snapshot_isolation: Isolation level for :func:`snapshot_session`
            transactions, or ``None`` to keep the driver default.
    """
    global _engine, _SessionLocal, _snapshot_isolation
    _engine = create_engine(_ensure_psycopg_driver(url), pool_pre_ping=True, **kwargs)
    # Sessions are read-only; nothing is flushed, so objects never need expiring
    _SessionLocal = sessionmaker(bind=_engine, autoflush=False, expire_on_commit=False)
    _snapshot_isolation = snapshot_isolation
    return _engine


def get_engine() -> Engine:
    """Return the global engine (must call init_engine first)."""
    if _engine is None:
        raise RuntimeError("Database engine not initialised; call init_engine() first")
    return _engine


@contextmanager
def snapshot_session() -> Iterator[Session]:
    """One read transaction per ledger snapshot.

    The transaction is opened up front at the snapshot isolation level and
    always rolled back on exit; analytics never writes to the ledger.
    """
    if _SessionLocal is None:
        raise RuntimeError("Database engine not initialised; call init_engine() first")
    with _SessionLocal() as session:
        if _snapshot_isolation is not None:
            session.connection(execution_options={"isolation_level": _snapshot_isolation})
        try:
            yield session
        finally:
            session.rollback()


def get_session() -> Generator[Session, None, None]:
    """Generator form of :func:`snapshot_session` for dependency injection."""
    with snapshot_session() as session:
        yield session
