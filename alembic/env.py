"""
Alembic environment for the shipment store.

Migrations run against PostgreSQL only; the reference tables, uploads and
shipments are all registered on `Base.metadata` through `db.models`.
"""

from __future__ import annotations

import os
from logging.config import fileConfig
from typing import Any

from alembic import context
from sqlalchemy import engine_from_config, pool

from db.base import Base
from db.config import get_engine_pool_settings, load_env_files, normalize_postgres_url, resolve_database_url
from db.models import (  # noqa: F401  imports trigger Base.metadata registration
    Location,
    MaterialMapping,
    Organization,
    ProgramType,
    Shipment,
    Upload,
)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _explicit_migration_url() -> str | None:
    x_args = context.get_x_argument(as_dictionary=True)
    candidates = (
        x_args.get("db_url"),
        os.getenv("ALEMBIC_DATABASE_URL"),
        config.get_main_option("sqlalchemy.url"),
    )
    for candidate in candidates:
        if candidate and candidate.strip():
            return candidate.strip()
    return None


def _migration_url() -> str:
    """
    Pick the migration target: `-x db_url=...`, then ALEMBIC_DATABASE_URL,
    then alembic.ini, then the application's own URL resolution.
    """

    load_env_files()
    explicit = _explicit_migration_url()
    url = normalize_postgres_url(explicit) if explicit else resolve_database_url()
    if not url.startswith("postgresql"):
        raise RuntimeError("Shipment store migrations support PostgreSQL URLs only.")
    return url


def _configure_kwargs() -> dict[str, Any]:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "compare_server_default": True,
    }


def run_migrations_offline() -> None:
    context.configure(
        url=_migration_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_kwargs(),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = _migration_url()
    application_name = f"{get_engine_pool_settings().application_name}-migrations"

    connectable = engine_from_config(
        section,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        connect_args={"application_name": application_name},
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_kwargs())
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
