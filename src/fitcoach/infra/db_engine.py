"""Async SQLAlchemy engine and session factory, a leaf module.

``build_db`` is a lifespan dependency: it creates the engine and the
session factory, attaches them to ``app.state`` and disposes the engine
on shutdown.  Per-request dependencies read them back from
``app.state``.

Kept outside the ``db`` package so ``telemetry`` can depend on
``build_db`` without importing the repositories, which import
``telemetry`` themselves.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from fitcoach.configs.config import AppConfig, get_app_config
from fitcoach.infra.lifespan import get_app


async def build_db(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Create engine and session factory, attach both to ``app.state``."""
    tp = config.third_party
    engine = create_async_engine(
        tp.postgres_uri,
        pool_pre_ping=True,
        pool_size=tp.postgres_pool_size,
        max_overflow=tp.postgres_max_overflow,
    )
    factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
        engine, expire_on_commit=False
    )
    app.state.engine = engine
    app.state.session_factory = factory
    yield
    await engine.dispose()


def get_session_factory(
    request: Request,
) -> async_sessionmaker[AsyncSession]:
    """Return the ``async_sessionmaker`` stored on ``app.state``."""
    return request.app.state.session_factory
