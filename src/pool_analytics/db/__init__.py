"""Database layer: engine, snapshot sessions, ORM base."""

from pool_analytics.db.base import Base
from pool_analytics.db.engine import get_engine, get_session, init_engine, snapshot_session

__all__ = ["Base", "get_engine", "get_session", "init_engine", "snapshot_session"]
