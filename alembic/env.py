"""Alembic environment for the constituency schema (async engine).

The target database comes from ``sqlalchemy.url`` when the caller set one
(``constituency-api db upgrade --database-url ...``), otherwise from
``DATABASE_URL``. ``DATABASE_SCHEMA`` isolates a per-environment schema on
PostgreSQL.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool, text
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.ext.asyncio import async_engine_from_config

import constituency_api.models  # noqa: F401  registers all tables on Base.metadata
from constituency_api.core.config import get_settings
from constituency_api.models.base import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _target() -> tuple[str, str | None]:
    """Return (database url, schema) for this migration run."""
    url = config.get_main_option("sqlalchemy.url")
    if url:
        # An explicit URL never picks up the application's schema.
        return url, None
    settings = get_settings()
    return settings.database_url, settings.database_schema


def _configure(schema: str | None, is_sqlite: bool, **kwargs: object) -> None:
    kwargs.setdefault("target_metadata", target_metadata)
    kwargs["compare_type"] = True
    # SQLite cannot ALTER most constraints in place.
    kwargs["render_as_batch"] = is_sqlite
    if schema is not None:
        kwargs["version_table_schema"] = schema
    context.configure(**kwargs)


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting."""
    url, schema = _target()
    _configure(
        schema,
        make_url(url).get_backend_name() == "sqlite",
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def _run_sync(connection: Connection, schema: str | None) -> None:
    if schema is not None:
        connection.execute(text(f'SET search_path TO "{schema}", public'))
    _configure(schema, connection.dialect.name == "sqlite", connection=connection)

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Migrate through an async engine with no connection pooling."""
    url, schema = _target()
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = url
    connectable = async_engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    try:
        async with connectable.connect() as connection:
            if schema is not None:
                await connection.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{schema}"'))
                await connection.commit()
            await connection.run_sync(_run_sync, schema)
    finally:
        await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
