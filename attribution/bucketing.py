"""
attribution/bucketing.py

Time-bucket keys for chart grouping.

Key rules
---------
day    → ``YYYY-MM-DD`` of the record's own date
week   → ``YYYY-MM-DD`` of the Sunday that starts the record's week
month  → ``YYYY-MM``

Dates are taken as local calendar dates. A ``datetime`` is reduced to its
own ``.date()`` without any time-zone conversion; callers holding UTC
timestamps must normalise them before bucketing.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from enum import Enum

from attribution.errors import ConfigurationError


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


def parse_granularity(value: Granularity | str) -> Granularity:
    """
    Coerce *value* into a :class:`Granularity`.

    Raises
    ------
    ConfigurationError
        If *value* is not one of ``day``, ``week``, ``month``.
    """
    if isinstance(value, Granularity):
        return value
    try:
        return Granularity(str(value).strip().lower())
    except ValueError:
        raise ConfigurationError(
            f"Unsupported group_by {value!r}. "
            f"Valid values: {[g.value for g in Granularity]}"
        ) from None


def week_start(day: date) -> date:
    """Return the Sunday on or before *day*."""
    # isoweekday(): Monday=1 .. Sunday=7, so Sunday maps to an offset of 0.
    return day - timedelta(days=day.isoweekday() % 7)


def bucket_key(value: date | datetime, granularity: Granularity | str) -> str:
    """Return the bucket key for *value* at the requested *granularity*."""
    return key_for(value, parse_granularity(granularity))


def key_for(value: date | datetime, grain: Granularity) -> str:
    """Like :func:`bucket_key`, for a granularity already parsed by the caller."""
    day = value.date() if isinstance(value, datetime) else value

    if grain is Granularity.DAY:
        return day.isoformat()
    if grain is Granularity.WEEK:
        return week_start(day).isoformat()
    return f"{day.year:04d}-{day.month:02d}"
