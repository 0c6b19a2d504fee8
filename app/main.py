from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from app.config import get_logging_settings

logger = logging.getLogger(__name__)


def _validate_env() -> None:
    """
    Validate dashboard environment variables at startup.

    Runs before any database connection is opened and raises RuntimeError
    listing every problem at once.

    Rules:
    - One of DATABASE_URL, SUPABASE_DB_URL, LOCAL_DATABASE_URL is set.
    - DASHBOARD_DEFAULT_RANGE_DAYS, when set, is a positive integer.
    - DASHBOARD_DEFAULT_GROUP_BY, when set, is day, week or month.
    """

    from attribution.bucketing import Granularity
    from db.config import DATABASE_URL_VARS, load_env_files

    load_env_files()

    errors: list[str] = []

    if not any(os.getenv(name, "").strip() for name in DATABASE_URL_VARS):
        errors.append(
            "No database URL configured. Set one of: " + ", ".join(DATABASE_URL_VARS) + "."
        )

    range_days = os.getenv("DASHBOARD_DEFAULT_RANGE_DAYS", "").strip()
    if range_days and (not range_days.isdigit() or int(range_days) < 1):
        errors.append(
            f"DASHBOARD_DEFAULT_RANGE_DAYS='{range_days}' is not a positive integer."
        )

    group_by = os.getenv("DASHBOARD_DEFAULT_GROUP_BY", "").strip().lower()
    allowed = sorted(g.value for g in Granularity)
    if group_by and group_by not in allowed:
        errors.append(
            f"DASHBOARD_DEFAULT_GROUP_BY='{group_by}' is not valid. Allowed values: {allowed}."
        )

    if errors:
        raise RuntimeError(
            "Startup validation failed, missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    settings = get_logging_settings()
    logging.basicConfig(
        level=getattr(logging, settings.level, logging.INFO),
        format=settings.format,
    )


def _check_db() -> None:
    """Run SELECT 1 on a fresh session. Raises RuntimeError if the DB is unreachable."""
    from sqlalchemy import text

    from db.session import SessionLocal

    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
    except Exception as exc:
        raise RuntimeError("Database unavailable.") from exc


def _check_tables() -> None:
    """
    Confirm every mapped dashboard table exists in the hosted database.

    The tables are owned by the upstream pipelines; a missing one means the
    service is pointed at the wrong database or schema, so startup aborts.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401  registers every mapping on Base.metadata
    from db.base import Base
    from db.session import get_engine

    actual = set(sa_inspect(get_engine()).get_table_names())
    missing = sorted(set(Base.metadata.tables) - actual)
    if missing:
        logger.critical("Dashboard tables missing from the database: %s", ", ".join(missing))
        raise RuntimeError(f"Dashboard tables missing from the database: {', '.join(missing)}.")


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Check connectivity and tables on boot; release the pool on exit."""
    from db.session import dispose_engine

    _check_db()
    logger.info("Database connectivity confirmed")
    _check_tables()
    logger.info("Dashboard tables present")
    try:
        yield
    finally:
        dispose_engine()
        logger.info("Database pool disposed")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="QLead Dashboard API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import dashboard_router

    application.include_router(dashboard_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
    )
