"""
alembic.env

Alembic migration environment configuration.

Responsibilities:
- Provide metadata discovery for autogeneration.
- Configure offline/online migration execution.

Notes:
- This module is executed by Alembic, not imported by the FastAPI runtime.
- Migrations run with a sync driver; the async `+aiosqlite` / `+asyncpg` suffix is
  stripped from the runtime URL.
"""

from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import make_url

from atlas_intake.db import models  # noqa: F401  # ensure models are registered on Base.metadata
from atlas_intake.db.base import Base
from atlas_intake.settings import Settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

_SYNC_DRIVERS = {"aiosqlite": "pysqlite", "asyncpg": "psycopg"}


def _get_database_url() -> str:
    # Prefer explicit env var for migrations
    raw = os.environ.get("ATLAS_DATABASE_URL") or Settings().database_url
    url = make_url(raw)
    driver = url.get_driver_name()
    if driver in _SYNC_DRIVERS:
        url = url.set(drivername=f"{url.get_backend_name()}+{_SYNC_DRIVERS[driver]}")
    return url.render_as_string(hide_password=False)


def run_migrations_offline() -> None:
    # Offline: emit SQL scripts without a DB connection.
    context.configure(
        url=_get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    # Online: run migrations against a live DB connection.
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = _get_database_url()
    connectable = engine_from_config(configuration, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
