"""
tests/test_config.py

Environment-driven settings.
"""

from __future__ import annotations

import os

import pytest

from app.config import get_dashboard_settings, get_logging_settings
from attribution.bucketing import Granularity
from db.config import (
    get_database_settings,
    load_env_files,
    normalize_postgres_url,
    resolve_database_url,
)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_dashboard_settings.cache_clear()
    get_logging_settings.cache_clear()
    get_database_settings.cache_clear()
    yield
    get_dashboard_settings.cache_clear()
    get_logging_settings.cache_clear()
    get_database_settings.cache_clear()


@pytest.fixture()
def no_database_env(monkeypatch):
    for name in ("DATABASE_URL", "SUPABASE_DB_URL", "LOCAL_DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)


class TestDashboardSettings:
    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("DASHBOARD_DEFAULT_RANGE_DAYS", raising=False)
        monkeypatch.delenv("DASHBOARD_DEFAULT_GROUP_BY", raising=False)

        settings = get_dashboard_settings()

        assert settings.default_range_days == 30
        assert settings.default_group_by is Granularity.DAY

    def test_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("DASHBOARD_DEFAULT_RANGE_DAYS", "90")
        monkeypatch.setenv("DASHBOARD_DEFAULT_GROUP_BY", "Month")

        settings = get_dashboard_settings()

        assert settings.default_range_days == 90
        assert settings.default_group_by is Granularity.MONTH

    def test_invalid_values_fall_back(self, monkeypatch) -> None:
        monkeypatch.setenv("DASHBOARD_DEFAULT_RANGE_DAYS", "-3")
        monkeypatch.setenv("DASHBOARD_DEFAULT_GROUP_BY", "hour")

        settings = get_dashboard_settings()

        assert settings.default_range_days == 30
        assert settings.default_group_by is Granularity.DAY

    def test_log_level_is_upper_cased(self, monkeypatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert get_logging_settings().level == "DEBUG"


class TestDatabaseUrl:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("postgres://u:p@host:5432/db", "postgresql+psycopg://u:p@host:5432/db"),
            ("postgresql://u:p@host/db", "postgresql+psycopg://u:p@host/db"),
            ("postgresql+psycopg://u:p@host/db", "postgresql+psycopg://u:p@host/db"),
        ],
    )
    def test_normalize(self, raw, expected) -> None:
        assert normalize_postgres_url(raw) == expected

    def test_database_url_wins(self, monkeypatch, no_database_env) -> None:
        monkeypatch.setenv("SUPABASE_DB_URL", "postgres://supabase/db")
        monkeypatch.setenv("DATABASE_URL", "postgres://primary/db")

        assert resolve_database_url() == "postgresql+psycopg://primary/db"

    def test_supabase_url_used_without_database_url(self, monkeypatch, no_database_env) -> None:
        monkeypatch.setenv("SUPABASE_DB_URL", "postgres://supabase/db")

        assert resolve_database_url() == "postgresql+psycopg://supabase/db"

    def test_missing_url_raises(self, monkeypatch, no_database_env) -> None:
        monkeypatch.setattr("db.config.load_env_files", lambda root=None: None)

        with pytest.raises(RuntimeError, match="No database URL configured"):
            resolve_database_url()

    def test_pool_settings(self, monkeypatch, no_database_env) -> None:
        monkeypatch.setenv("DATABASE_URL", "postgresql://h/db")
        monkeypatch.setenv("DB_POOL_SIZE", "12")
        monkeypatch.setenv("SQL_ECHO", "true")

        settings = get_database_settings()

        assert settings.pool_size == 12
        assert settings.echo is True
        assert settings.max_overflow == 10


class TestEnvFiles:
    def test_values_load_without_overwriting(self, monkeypatch, tmp_path) -> None:
        (tmp_path / ".env").write_text(
            "# comment\nQLEAD_TEST_A='from-file'\nexport QLEAD_TEST_B=2\nQLEAD_TEST_C=file\n",
            encoding="utf-8",
        )
        monkeypatch.delenv("QLEAD_TEST_A", raising=False)
        monkeypatch.delenv("QLEAD_TEST_B", raising=False)
        monkeypatch.setenv("QLEAD_TEST_C", "process")

        load_env_files(tmp_path)

        assert os.environ["QLEAD_TEST_A"] == "from-file"
        assert os.environ["QLEAD_TEST_B"] == "2"
        assert os.environ["QLEAD_TEST_C"] == "process"
