"""
app/config.py

Dashboard API settings read from the environment.

``.env`` / ``.env.local`` are loaded once on first access (see
:func:`db.config.load_env_files`). Unparseable values fall back to their
defaults here; ``app.main`` rejects them loudly at startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from attribution.bucketing import Granularity
from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    load_env_files()


def _env(name: str) -> str | None:
    _load_env_once()
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass(frozen=True)
class DashboardSettings:
    """
    Defaults applied when a dashboard request omits its filters.

    Attributes
    ----------
    default_range_days:
        Length of the range used when no ``start_date`` / ``end_date`` is
        given; mirrors the "Last 30 Days" preset.
    default_group_by:
        Chart granularity used when no ``group_by`` is given.
    """

    default_range_days: int = 30
    default_group_by: Granularity = Granularity.DAY


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@lru_cache(maxsize=1)
def get_dashboard_settings() -> DashboardSettings:
    defaults = DashboardSettings()

    range_days = defaults.default_range_days
    raw_days = _env("DASHBOARD_DEFAULT_RANGE_DAYS")
    if raw_days is not None and raw_days.isdigit() and int(raw_days) > 0:
        range_days = int(raw_days)

    group_by = defaults.default_group_by
    raw_group_by = _env("DASHBOARD_DEFAULT_GROUP_BY")
    if raw_group_by is not None and raw_group_by.lower() in {g.value for g in Granularity}:
        group_by = Granularity(raw_group_by.lower())

    return DashboardSettings(default_range_days=range_days, default_group_by=group_by)


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings(level=(_env("LOG_LEVEL") or "INFO").upper())
