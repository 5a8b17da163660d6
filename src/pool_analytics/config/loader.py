"""Config loader: reads YAML, applies POOL_* env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from pool_analytics.config.schema import AnalyticsConfig

# env var -> (section, key)
_ENV_OVERRIDES = {
    "POOL_DATABASE_URL": ("database", "url"),
    "POOL_LOG_LEVEL": ("logging", "level"),
    "POOL_LOG_FORMAT": ("logging", "format"),
    "POOL_BUCKET_POLICY": ("bucketing", "policy"),
}


def load_config(path: str | Path | None = None) -> AnalyticsConfig:
    """Load config from a YAML file, then apply env var overrides.

    If *path* is None or the file doesn't exist, returns defaults.

    Environment variable overrides:
        POOL_DATABASE_URL   -> database.url
        POOL_LOG_LEVEL      -> logging.level
        POOL_LOG_FORMAT     -> logging.format
        POOL_BUCKET_POLICY  -> bucketing.policy
    """
    data: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}

    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            data.setdefault(section, {})[key] = value

    return AnalyticsConfig.model_validate(data)
