"""
tests/test_bucketing.py

Bucket keys and group_by parsing.
"""

from __future__ import annotations

from datetime import date, datetime

import pytest

from attribution.bucketing import (
    Granularity,
    bucket_key,
    key_for,
    parse_granularity,
    week_start,
)
from attribution.errors import ConfigurationError


class TestParseGranularity:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("day", Granularity.DAY),
            ("WEEK", Granularity.WEEK),
            (" month ", Granularity.MONTH),
            (Granularity.WEEK, Granularity.WEEK),
        ],
    )
    def test_accepts_known_values(self, raw, expected) -> None:
        assert parse_granularity(raw) is expected

    @pytest.mark.parametrize("raw", ["quarter", "", "days", None])
    def test_rejects_unknown_values(self, raw) -> None:
        with pytest.raises(ConfigurationError, match="Unsupported group_by"):
            parse_granularity(raw)


class TestWeekStart:
    def test_sunday_is_its_own_week_start(self) -> None:
        assert week_start(date(2024, 1, 7)) == date(2024, 1, 7)

    def test_saturday_rolls_back_six_days(self) -> None:
        assert week_start(date(2024, 1, 13)) == date(2024, 1, 7)

    def test_week_can_start_in_previous_month(self) -> None:
        assert week_start(date(2024, 3, 2)) == date(2024, 2, 25)

    def test_week_can_start_in_previous_year(self) -> None:
        assert week_start(date(2025, 1, 1)) == date(2024, 12, 29)


class TestBucketKey:
    def test_day_key_is_iso_date(self) -> None:
        assert bucket_key(date(2024, 1, 5), "day") == "2024-01-05"

    def test_week_key_is_sunday_iso_date(self) -> None:
        assert bucket_key(date(2024, 1, 10), Granularity.WEEK) == "2024-01-07"

    def test_month_key_is_year_and_month(self) -> None:
        assert bucket_key(date(2024, 2, 29), "month") == "2024-02"

    def test_datetime_is_reduced_to_its_date(self) -> None:
        assert bucket_key(datetime(2024, 1, 5, 23, 59, 59), "day") == "2024-01-05"

    def test_keys_sort_chronologically(self) -> None:
        days = [date(2023, 12, 31), date(2024, 1, 1), date(2024, 10, 2)]
        keys = [bucket_key(d, "day") for d in days]
        assert keys == sorted(keys)

    @pytest.mark.parametrize("grain", list(Granularity))
    def test_key_for_matches_bucket_key(self, grain) -> None:
        day = date(2024, 3, 2)
        assert key_for(day, grain) == bucket_key(day, grain.value)
