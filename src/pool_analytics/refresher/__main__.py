"""Allow running the refresher as: python -m pool_analytics.refresher --event-id ID [--config path]."""

from pool_analytics.refresher.runner import main

main()
