from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from pydantic import BaseModel

from app.logging_utils import configure_logging, log_event

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    status: str
    version: str


def _database_url_errors() -> list[str]:
    from db.config import resolve_database_url

    try:
        url = resolve_database_url()
    except RuntimeError as exc:
        return [str(exc)]
    if not url.startswith("postgresql"):
        return ["The shipment store requires a PostgreSQL URL."]
    return []


def _chunk_size_errors() -> list[str]:
    raw = os.getenv("INGEST_CHUNK_SIZE", "").strip()
    if not raw:
        return []
    try:
        if int(raw) >= 1:
            return []
    except ValueError:
        pass
    return [f"INGEST_CHUNK_SIZE='{raw}' must be a positive integer."]


def _field_synonym_errors() -> list[str]:
    if not os.getenv("INGEST_FIELD_SYNONYMS_JSON", "").strip():
        return []

    from app.config import get_field_synonyms
    from app.mappers.field_mapper import FieldMapper, FieldSynonymConfigError

    try:
        FieldMapper(synonyms=get_field_synonyms())
    except FieldSynonymConfigError as exc:
        return [str(exc)]
    return []


def _validate_env() -> None:
    """
    Fail fast on configuration the ingestion pipeline cannot run with.

    Every problem is collected before raising so one restart fixes them all.
    """

    from db.config import load_env_files

    load_env_files()
    errors = _database_url_errors() + _chunk_size_errors() + _field_synonym_errors()
    if errors:
        raise RuntimeError(
            "Startup validation failed:\n" + "\n".join(f"  - {error}" for error in errors)
        )


def _check_db() -> None:
    """Run SELECT 1 through a fresh session. Raises RuntimeError if the store is unreachable."""
    from sqlalchemy import text

    from db.session import SessionLocal

    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
    except Exception as exc:
        raise RuntimeError("Shipment store unavailable.") from exc


def _check_schema() -> None:
    """
    Require every ORM table (reference data, uploads, shipments) to exist.

    Migrations are never applied here; run `alembic upgrade head` first.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401  registers all ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    present = set(sa_inspect(get_engine()).get_table_names())
    missing = sorted(set(Base.metadata.tables) - present)
    if missing:
        log_event(logger, logging.CRITICAL, "schema_mismatch", missing_tables=missing)
        raise RuntimeError(
            f"Missing table(s): {', '.join(missing)}. Run 'alembic upgrade head' and restart."
        )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    _check_db()
    _check_schema()
    log_event(logger, logging.INFO, "startup_checks_passed", version=application.version)
    yield

    from db.session import dispose_engine

    dispose_engine()


def create_app() -> FastAPI:
    """
    Build the ingestion API: upload acceptance, upload status and material mappings.
    """

    _validate_env()
    configure_logging()

    application = FastAPI(
        title="Shipment Ingestion API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import material_mappings_router, uploads_router

    application.include_router(uploads_router)
    application.include_router(material_mappings_router)

    @application.get("/health", response_model=HealthResponse)
    def healthcheck() -> HealthResponse:
        return HealthResponse(status="ok", version=application.version)

    return application


app = create_app()
