"""Alembic environment configuration, async-aware.

Reads the database URL from the ``FITCOACH_THIRD_PARTY__POSTGRES_URI``
environment variable (or falls back to the application config) so that
the same URI is used locally, in CI and in deployment.

Uses ``asyncpg`` as the async driver; no separate sync driver needed.
"""

import asyncio
import os

from alembic import context
from sqlalchemy.ext.asyncio import create_async_engine

# Import Base.metadata so --autogenerate can detect model changes.
from fitcoach.infra.db.models import Base  # noqa: F401

target_metadata = Base.metadata


def _get_database_url() -> str:
    url = os.environ.get("FITCOACH_THIRD_PARTY__POSTGRES_URI")
    if url:
        return url
    from fitcoach.configs.config import get_app_config

    return get_app_config().third_party.postgres_uri


def run_migrations_offline() -> None:
    """Emit SQL without a live database."""
    context.configure(
        url=_get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = create_async_engine(_get_database_url())
    async with engine.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
