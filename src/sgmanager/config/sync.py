"""Polling defaults for the sync loop."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, parse_float
from .errors import ConfigurationError

SYNC_INTERVAL_ENV = "SGMANAGER_SYNC_INTERVAL_SECONDS"
DEFAULT_SYNC_INTERVAL_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class SyncConfig:
    interval_seconds: float = DEFAULT_SYNC_INTERVAL_SECONDS

    def __post_init__(self) -> None:
        if self.interval_seconds < 0:
            raise ConfigurationError("Sync interval must be non-negative")


def get_sync_config() -> SyncConfig:
    raw_interval = optional_env_var(SYNC_INTERVAL_ENV)
    if raw_interval is None:
        return SyncConfig()
    return SyncConfig(interval_seconds=parse_float(SYNC_INTERVAL_ENV, raw_interval))
