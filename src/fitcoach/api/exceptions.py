"""Translate domain exceptions into JSON error responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fitcoach.core.errors import (
    AuthenticationFailed,
    Conflict,
    FitcoachError,
    GenerationFailed,
    InvalidInput,
    LLMNotConfigured,
    NotFound,
    PdfRenderError,
    PermissionDenied,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[FitcoachError], int] = {
    AuthenticationFailed: 401,
    PermissionDenied: 403,
    NotFound: 404,
    Conflict: 409,
    InvalidInput: 422,
    GenerationFailed: 502,
    PdfRenderError: 500,
    LLMNotConfigured: 503,
}


def status_for(exc: FitcoachError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]  # type: ignore[index]
    return 400


def register_exception_handlers(app: FastAPI) -> None:
    """Register the domain exception handler on *app*."""

    @app.exception_handler(FitcoachError)
    async def handle_domain_error(request: Request, exc: FitcoachError) -> JSONResponse:
        status = status_for(exc)
        if status >= 500:
            logger.warning("%s on %s: %s", exc.code, request.url.path, exc)
        headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
        return JSONResponse(
            status_code=status,
            content={"detail": str(exc), "code": exc.code},
            headers=headers,
        )
