"""Ledger models: what the store hands back for one event."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class BetRecord(BaseModel):
    """One placed bet. Immutable once persisted."""

    model_config = ConfigDict(frozen=True)

    option_id: str
    amount: float = Field(ge=0)
    placed_at: datetime
    user_id: str


class BetOption(BaseModel):
    """An option row as the store keeps it, with running totals."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    total_bets: float = 0.0
    bettors: int = 0


class EventTotals(BaseModel):
    """Authoritative event-level totals."""

    model_config = ConfigDict(frozen=True)

    event_id: str
    title: str = ""
    status: str = "open"
    total_pool: float = 0.0
    participant_count: int = 0


class LedgerSnapshot(BaseModel):
    """Result of one logical read: totals, options and the ordered bets."""

    model_config = ConfigDict(frozen=True)

    totals: EventTotals
    options: list[BetOption]
    bets: list[BetRecord] = []

    @property
    def option_ids(self) -> list[str]:
        return [o.id for o in self.options]
