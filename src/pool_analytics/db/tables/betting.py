"""SQLAlchemy ORM models for the pool_betting schema."""

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import DateTime

from pool_analytics.db.base import Base

SCHEMA = "pool_betting"


class EventRow(Base):
    __tablename__ = "events"
    __table_args__ = {"schema": SCHEMA}

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="open")
    # Maintained by the store; authoritative over sums of the bets table
    total_pool: Mapped[float] = mapped_column(Numeric, nullable=False, default=0)
    participant_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[DateTime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class BetOptionRow(Base):
    __tablename__ = "bet_options"
    __table_args__ = {"schema": SCHEMA}

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    event_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey(f"{SCHEMA}.events.id"),
        nullable=False,
    )
    label: Mapped[str] = mapped_column(Text, nullable=False)
    total_bets: Mapped[float] = mapped_column(Numeric, nullable=False, default=0)
    bettors: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class BetRow(Base):
    __tablename__ = "bets"
    __table_args__ = (
        Index("ix_bets_event_placed_at", "event_id", "placed_at"),
        {"schema": SCHEMA},
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    event_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey(f"{SCHEMA}.events.id"),
        nullable=False,
    )
    option_id: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[float] = mapped_column(Numeric, nullable=False)
    placed_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), nullable=False)
