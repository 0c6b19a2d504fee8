"""
db/config.py

Database connection settings for the hosted dashboard store.

Values come from the process environment, topped up from ``.env`` and
``.env.local`` at the repository root. Variables already set in the process
always win over file values.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

ENV_FILES = (".env", ".env.local")
DATABASE_URL_VARS = ("DATABASE_URL", "SUPABASE_DB_URL", "LOCAL_DATABASE_URL")


def _parse_env_line(raw_line: str) -> tuple[str, str] | None:
    line = raw_line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, value = line.split("=", 1)
    key = key.removeprefix("export ").strip()
    if not key:
        return None
    return key, value.strip().strip('"').strip("'")


def load_env_files(root: Path | None = None) -> None:
    """
    Copy ``KEY=VALUE`` pairs from the env files under *root* into
    ``os.environ`` without overwriting existing variables.
    """

    base = root or Path(__file__).resolve().parents[1]
    for filename in ENV_FILES:
        env_path = base / filename
        if not env_path.is_file():
            continue
        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            parsed = _parse_env_line(raw_line)
            if parsed is not None:
                os.environ.setdefault(*parsed)


def normalize_postgres_url(url: str) -> str:
    """
    Rewrite ``postgres://`` / ``postgresql://`` URLs (Supabase hands out the
    former) to SQLAlchemy's ``postgresql+psycopg://`` driver form.
    """

    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix):]
    return url


def resolve_database_url() -> str:
    """
    Return the first configured URL among ``DATABASE_URL``,
    ``SUPABASE_DB_URL`` and ``LOCAL_DATABASE_URL``.

    Raises
    ------
    RuntimeError
        If none of them is set.
    """

    load_env_files()
    for name in DATABASE_URL_VARS:
        url = os.getenv(name, "").strip()
        if url:
            return normalize_postgres_url(url)

    raise RuntimeError(
        "No database URL configured. Set DATABASE_URL, SUPABASE_DB_URL "
        "or LOCAL_DATABASE_URL."
    )


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, ""))
    except ValueError:
        return default


@dataclass(frozen=True)
class DatabaseSettings:
    url: str
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_recycle: int = 1800


@lru_cache(maxsize=1)
def get_database_settings() -> DatabaseSettings:
    """Return cached connection settings; raises RuntimeError without a URL."""

    url = resolve_database_url()
    return DatabaseSettings(
        url=url,
        echo=os.getenv("SQL_ECHO", "").strip().lower() in {"1", "true", "yes", "on"},
        pool_size=_env_int("DB_POOL_SIZE", 5),
        max_overflow=_env_int("DB_MAX_OVERFLOW", 10),
        pool_recycle=_env_int("DB_POOL_RECYCLE", 1800),
    )
