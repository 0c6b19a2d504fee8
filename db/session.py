"""
db/session.py

Engine and session wiring for the dashboard's read-only queries.

Nothing connects at import time. The engine is built from
:func:`db.config.get_database_settings` on first use; repositories never
open sessions themselves and receive one from :func:`get_db` or the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.config import DatabaseSettings, get_database_settings

logger = logging.getLogger(__name__)

_engine: Engine | None = None
_session_factory: sessionmaker | None = None


def create_db_engine(settings: DatabaseSettings | None = None) -> Engine:
    """
    Build a pooled PostgreSQL engine.

    Raises
    ------
    RuntimeError
        If the configured URL is not a PostgreSQL URL.
    """
    settings = settings or get_database_settings()
    if not settings.url.startswith("postgresql"):
        raise RuntimeError("Only PostgreSQL URLs are supported.")

    return create_engine(
        settings.url,
        echo=settings.echo,
        pool_pre_ping=True,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_recycle=settings.pool_recycle,
    )


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_db_engine()
        logger.info("Database engine created")
    return _engine


def dispose_engine() -> None:
    """Close pooled connections and forget the engine and session factory."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


def SessionLocal() -> Session:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(
            bind=get_engine(),
            autoflush=False,
            expire_on_commit=False,
        )
    return _session_factory()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding one session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
