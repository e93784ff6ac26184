"""
db/session.py

Shared engine and session factory for request handlers and background batch runs.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.config import EnginePoolSettings, get_engine_pool_settings, resolve_database_url


def build_connect_args(settings: EnginePoolSettings) -> dict[str, Any]:
    """
    libpq connection options: application name, plus a statement timeout when set.
    """

    connect_args: dict[str, Any] = {"application_name": settings.application_name}
    if settings.statement_timeout_ms > 0:
        connect_args["options"] = f"-c statement_timeout={settings.statement_timeout_ms}"
    return connect_args


def create_db_engine(settings: EnginePoolSettings | None = None) -> Engine:
    database_url = resolve_database_url()
    if not database_url.startswith("postgresql"):
        raise RuntimeError("Only PostgreSQL URLs are supported.")

    engine_settings = settings or get_engine_pool_settings()
    return create_engine(
        database_url,
        echo=engine_settings.echo,
        pool_pre_ping=True,
        pool_recycle=engine_settings.pool_recycle,
        pool_size=engine_settings.pool_size,
        max_overflow=engine_settings.max_overflow,
        connect_args=build_connect_args(engine_settings),
    )


_engine: Engine | None = None
_session_factory: sessionmaker | None = None


def get_engine() -> Engine:
    """Return the shared engine, creating it on first call."""
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def dispose_engine() -> None:
    """Close pooled connections and forget the shared engine and factory."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


def _get_session_factory() -> sessionmaker:
    global _session_factory
    if _session_factory is None:
        # expire_on_commit=False keeps upload attributes readable after the
        # acceptance commits, when the response is built.
        _session_factory = sessionmaker(
            bind=get_engine(),
            class_=Session,
            autoflush=False,
            expire_on_commit=False,
        )
    return _session_factory


def SessionLocal() -> Session:
    """Lazy session factory. Background batch runs open their own session through it."""
    return _get_session_factory()()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding one request-scoped session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
