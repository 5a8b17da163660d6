"""Refresher entry point: wire config, DB sessions, change listener and the refresh loop."""

from __future__ import annotations

import argparse
import asyncio

from pool_analytics.analytics.cache import SnapshotCache
from pool_analytics.config.loader import load_config
from pool_analytics.config.schema import AnalyticsConfig
from pool_analytics.db.engine import init_engine, snapshot_session
from pool_analytics.ledger.reader import SqlLedgerReader
from pool_analytics.logging.setup import get_logger, setup_logging
from pool_analytics.models import DataPoint
from pool_analytics.refresher.listener import PgChangeListener
from pool_analytics.refresher.loop import Compute, RefreshLoop
from pool_analytics.refresher.notifier import LocalChangeNotifier
from pool_analytics.service import AnalyticsService

log = get_logger("refresher")


def session_scoped_compute(config: AnalyticsConfig, cache: SnapshotCache) -> Compute:
    """Each recompute gets its own snapshot session, so each reads fresh data."""

    def compute(event_id: str) -> DataPoint:
        with snapshot_session() as session:
            service = AnalyticsService(SqlLedgerReader(session), config, cache)
            return service.compute_realtime_snapshot(event_id)

    return compute


def build_listener(config: AnalyticsConfig, notifier: LocalChangeNotifier) -> PgChangeListener | None:
    """Change listener for the configured database, or None when push is disabled."""
    if not config.realtime.listen_for_changes:
        return None
    return PgChangeListener(
        config.database.url,
        notifier,
        channel=config.realtime.change_channel,
        reconnect_delay_s=config.realtime.reconnect_delay_s,
    )


async def run_loop(config: AnalyticsConfig, event_ids: list[str]) -> None:
    init_engine(config.database.url)
    cache = SnapshotCache(ttl_seconds=config.realtime.snapshot_ttl_s)
    refresher = RefreshLoop(
        session_scoped_compute(config, cache),
        poll_interval_s=config.realtime.poll_interval_s,
    )
    notifier = LocalChangeNotifier()
    refresher.attach(notifier, event_ids)

    # Prime every event once so the first timer tick has momentum to compare
    for event_id in event_ids:
        refresher.trigger(event_id)

    listener = build_listener(config, notifier)
    if listener is None:
        log.info("change_listener_disabled")
        await refresher.run(event_ids)
        return

    listen_task = asyncio.create_task(listener.run())
    try:
        await refresher.run(event_ids)
    finally:
        listen_task.cancel()


def main(config_path: str | None = None) -> None:
    parser = argparse.ArgumentParser(description="Realtime pool snapshot refresher")
    parser.add_argument("--config", default=config_path, help="Path to config.yaml")
    parser.add_argument("--event-id", action="append", required=True, dest="event_ids",
                        help="Event to watch (repeatable)")
    args = parser.parse_args()

    config = load_config(args.config)
    setup_logging(level=config.logging.level, log_format=config.logging.format)
    log.info("refresher_boot", events=args.event_ids)
    asyncio.run(run_loop(config, args.event_ids))
