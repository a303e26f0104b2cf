"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI

from fitcoach.api.admin import router as admin_router
from fitcoach.api.auth import router as auth_router
from fitcoach.api.chat import router as chat_router
from fitcoach.api.exceptions import register_exception_handlers
from fitcoach.api.programs import router as programs_router
from fitcoach.api.settings import router as settings_router
from fitcoach.api.users import router as users_router
from fitcoach.configs.config import get_app_config
from fitcoach.core.service.metrics import setup_metrics
from fitcoach.infra.db_engine import build_db
from fitcoach.infra.lifespan import inject
from fitcoach.infra.logging import setup_logging
from fitcoach.infra.telemetry import build_telemetry

logger = logging.getLogger(__name__)


@inject
async def lifespan(
    app: FastAPI,
    _db: Annotated[None, Depends(build_db)],
    _telemetry: Annotated[None, Depends(build_telemetry)],
) -> AsyncGenerator[None, None]:
    logger.info("Starting fitcoach")
    yield
    logger.info("Shutting down fitcoach")


def get_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_app_config()
    setup_logging(config.logging)

    app = FastAPI(
        title="fitcoach",
        description="AI fitness coaching: chat, profiles and custom programs",
        version="0.1.0",
        lifespan=lifespan,
    )

    register_exception_handlers(app)
    setup_metrics(app, config)

    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(chat_router)
    app.include_router(programs_router)
    app.include_router(settings_router)
    app.include_router(admin_router)

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = get_app()
