"""
app/services/date_ranges.py

Date-range presets offered by the dashboard filters.

All ranges are inclusive ``(start, end)`` calendar-date pairs. ``today`` is
passed in so callers (and tests) control the clock.

Presets
-------
last_7 / last_30 / last_90  → :func:`last_n_days`
last_month                  → :func:`last_month`
"""

from __future__ import annotations

from datetime import date, timedelta

PRESET_DAYS: dict[str, int] = {"last_7": 7, "last_30": 30, "last_90": 90}
LAST_MONTH = "last_month"
PRESETS: tuple[str, ...] = (*PRESET_DAYS, LAST_MONTH)


class InvalidRangeError(ValueError):
    """Raised for an inverted range, a negative length or an unknown preset."""


def last_n_days(days: int, today: date) -> tuple[date, date]:
    """
    Return ``(today - days, today)``.

    Matches the "Last 7 / 30 / 90 Days" buttons: the window spans ``days + 1``
    calendar dates, both ends included.
    """
    if days < 0:
        raise InvalidRangeError(f"days must be non-negative; got {days}")
    return today - timedelta(days=days), today


def last_month(today: date) -> tuple[date, date]:
    """Return the first and last day of the calendar month before *today*."""
    first_of_this_month = today.replace(day=1)
    end = first_of_this_month - timedelta(days=1)
    return end.replace(day=1), end


def resolve_preset(preset: str, today: date) -> tuple[date, date]:
    """
    Return the range named by *preset*.

    Raises
    ------
    InvalidRangeError
        If *preset* is not one of :data:`PRESETS`.
    """
    name = preset.strip().lower()
    if name == LAST_MONTH:
        return last_month(today)
    if name in PRESET_DAYS:
        return last_n_days(PRESET_DAYS[name], today)
    raise InvalidRangeError(f"Unknown preset {preset!r}. Valid presets: {list(PRESETS)}")


def validate_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise InvalidRangeError(
            f"start_date must not be after end_date; "
            f"got {start_date.isoformat()} > {end_date.isoformat()}"
        )


def resolve_range(
    start_date: date | None,
    end_date: date | None,
    today: date,
    default_days: int = 30,
) -> tuple[date, date]:
    """
    Fill in missing range ends.

    - neither given → the last *default_days* days ending today
    - only *end_date* → *default_days* days ending at *end_date*
    - only *start_date* → *start_date* through today

    Raises
    ------
    InvalidRangeError
        If the resolved start falls after the resolved end.
    """
    if start_date is None and end_date is None:
        start, end = last_n_days(default_days, today)
    elif start_date is None:
        start, end = last_n_days(default_days, end_date)
    elif end_date is None:
        start, end = start_date, today
    else:
        start, end = start_date, end_date

    validate_range(start, end)
    return start, end
