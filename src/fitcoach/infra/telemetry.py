"""OpenTelemetry bootstrap: tracer provider, instrumentations, span names.

When ``TracingConfig.enabled`` is false (local development, tests) the
module is a no-op and ``tracer`` hands out non-recording spans.

Auto-instrumentations:

- FastAPI (inbound HTTP spans)
- httpx (outbound calls, which covers the OpenAI client)
- SQLAlchemy (database spans)

Usage::

    from fitcoach.infra.telemetry import SPAN_CONTEXT_SELECT, tracer

    with tracer.start_as_current_span(SPAN_CONTEXT_SELECT) as span:
        ...
"""

from __future__ import annotations

import base64
import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI
from opentelemetry import trace
from opentelemetry.trace import format_trace_id

from fitcoach.configs.config import AppConfig, get_app_config
from fitcoach.configs.system import TracingConfig
from fitcoach.infra.db_engine import build_db
from fitcoach.infra.lifespan import get_app

logger = logging.getLogger(__name__)

_otel_enabled = False

tracer = trace.get_tracer("fitcoach")

# ---------------------------------------------------------------------------
# Span names
# ---------------------------------------------------------------------------

SPAN_SSE_STREAM = "sse.stream"
SPAN_CHAT_REPLY = "chat.reply"
SPAN_CONTEXT_SELECT = "context.select"
SPAN_HISTORY_LOAD = "history.load"
SPAN_PROGRAM_CUSTOMIZE = "program.customize"
SPAN_PDF_RENDER = "pdf.render"

# ---------------------------------------------------------------------------
# Span attribute keys
# ---------------------------------------------------------------------------

ATTR_SSE_ERROR_CODE = "sse.error_code"
ATTR_SSE_EVENT_COUNTS = "sse.event_counts"
ATTR_SSE_SERVICE = "sse.service"

ATTR_CONTEXT_CANDIDATES = "context.candidates"
ATTR_CONTEXT_SELECTED = "context.selected"
ATTR_CONTEXT_LIMIT = "context.limit"

ATTR_HISTORY_USER_ID = "history.user_id"
ATTR_HISTORY_MESSAGE_COUNT = "history.message_count"

ATTR_PROGRAM_ID = "program.id"
ATTR_PDF_BYTES = "pdf.bytes"


def init_telemetry(
    app: object | None = None,
    settings: TracingConfig | None = None,
) -> None:
    """Initialise the OTEL ``TracerProvider`` and auto-instrumentations.

    Parameters
    ----------
    app:
        The FastAPI application, handed to the FastAPI instrumentor.
    settings:
        Tracing configuration.  ``None`` or ``enabled=False`` is a no-op.
    """
    global _otel_enabled  # noqa: PLW0603

    if settings is None or not settings.enabled:
        logger.info("OpenTelemetry tracing disabled.")
        return

    if not settings.endpoint or not settings.username or not settings.password:
        logger.warning(
            "Tracing enabled but endpoint or credentials are missing; "
            "skipping OpenTelemetry setup."
        )
        return

    from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
        OTLPSpanExporter,
    )
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor
    from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

    resource = Resource.create({"service.name": settings.service_name})
    sampler = ParentBased(root=TraceIdRatioBased(settings.sample_rate))
    provider = TracerProvider(resource=resource, sampler=sampler)

    credentials = f"{settings.username}:{settings.password}"
    encoded = base64.b64encode(credentials.encode()).decode()
    exporter = OTLPSpanExporter(
        endpoint=settings.endpoint,
        headers={"Authorization": f"Basic {encoded}"},
    )
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    if app is not None:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        excluded = ",".join(settings.excluded_urls) if settings.excluded_urls else ""
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded)

    from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

    HTTPXClientInstrumentor().instrument()

    _otel_enabled = True
    logger.info(
        "OpenTelemetry tracing initialised (service=%s).", settings.service_name
    )


def instrument_sqlalchemy(engine: object) -> None:
    """Attach DB span tracing to *engine*; no-op while tracing is off."""
    if not _otel_enabled:
        return

    from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor

    sync_engine = getattr(engine, "sync_engine", engine)
    SQLAlchemyInstrumentor().instrument(engine=sync_engine)
    logger.info("SQLAlchemy engine instrumented for OTEL tracing.")


def get_current_trace_id() -> str | None:
    """Return the active trace ID as 32 hex chars, or ``None`` outside a span."""
    ctx = trace.get_current_span().get_span_context()
    if ctx is None or not ctx.is_valid:
        return None
    return format_trace_id(ctx.trace_id)


# ---------------------------------------------------------------------------
# Lifespan dependency
# ---------------------------------------------------------------------------


async def build_telemetry(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
    _db: Annotated[None, Depends(build_db)],
) -> AsyncGenerator[None, None]:
    """Initialise tracing once the engine exists so it can be instrumented."""
    init_telemetry(app, config.tracing)
    instrument_sqlalchemy(app.state.engine)
    yield
