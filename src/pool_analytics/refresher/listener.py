"""Postgres change listener: table triggers into a LocalChangeNotifier.

Migration 002 installs row triggers on ``bets``, ``bet_options`` and
``events`` that ``pg_notify`` a JSON payload such as::

    {"table": "bets", "op": "INSERT", "event_id": "evt-1"}

on the ``pool_changes`` channel. The listener holds one autocommit psycopg
connection, LISTENs on that channel and forwards each payload to the
notifier keyed by its ``event_id``. Dropped connections are re-opened after
``reconnect_delay_s``; notifications missed in between are covered by the
refresh loop's poll timer.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import psycopg
import structlog
from psycopg import sql

from pool_analytics.refresher.notifier import LocalChangeNotifier

log = structlog.get_logger("change_listener")

CHANNEL = "pool_changes"


def libpq_url(url: str) -> str:
    """Strip the SQLAlchemy driver suffix so psycopg accepts the URL."""
    if url.startswith("postgresql+psycopg://"):
        return "postgresql://" + url[len("postgresql+psycopg://"):]
    return url


def parse_notification(payload: str) -> tuple[str, dict[str, Any]] | None:
    """Return ``(event_id, data)`` for a trigger payload, or None if unusable."""
    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        log.warning("change_payload_invalid", payload=payload)
        return None
    event_id = data.get("event_id") if isinstance(data, dict) else None
    if not event_id:
        log.warning("change_payload_without_event", payload=payload)
        return None
    return str(event_id), data


class PgChangeListener:
    """Bridges Postgres LISTEN/NOTIFY to in-process change handlers."""

    def __init__(
        self,
        url: str,
        notifier: LocalChangeNotifier,
        *,
        channel: str = CHANNEL,
        reconnect_delay_s: float = 5.0,
    ) -> None:
        self.url = libpq_url(url)
        self.notifier = notifier
        self.channel = channel
        self.reconnect_delay_s = reconnect_delay_s

    def dispatch(self, payload: str) -> int:
        """Forward one payload; returns how many handlers ran."""
        parsed = parse_notification(payload)
        if parsed is None:
            return 0
        event_id, data = parsed
        return self.notifier.notify(event_id, data)

    async def listen_once(self) -> None:
        """Hold one connection and dispatch until it closes."""
        async with await psycopg.AsyncConnection.connect(self.url, autocommit=True) as conn:
            await conn.execute(sql.SQL("LISTEN {}").format(sql.Identifier(self.channel)))
            log.info("change_listener_connected", channel=self.channel)
            async for note in conn.notifies():
                self.dispatch(note.payload)

    async def run(self) -> None:
        """Listen forever, reconnecting after connection failures."""
        while True:
            try:
                await self.listen_once()
            except psycopg.OperationalError as exc:
                log.warning(
                    "change_listener_disconnected",
                    channel=self.channel,
                    error=str(exc),
                    retry_in_s=self.reconnect_delay_s,
                )
            await asyncio.sleep(self.reconnect_delay_s)
