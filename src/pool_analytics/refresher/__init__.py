"""Realtime refresh: change notifications to recomputed snapshots."""

from pool_analytics.refresher.listener import PgChangeListener
from pool_analytics.refresher.loop import RefreshLoop, log_publisher
from pool_analytics.refresher.notifier import ChangeNotifier, LocalChangeNotifier

__all__ = ["ChangeNotifier", "LocalChangeNotifier", "PgChangeListener", "RefreshLoop", "log_publisher"]
