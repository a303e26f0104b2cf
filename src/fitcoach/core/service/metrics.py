"""Prometheus metrics for fitcoach.

Business metrics that complement the HTTP metrics collected by
``prometheus-fastapi-instrumentator``.  All names use the ``fitcoach_``
prefix.
"""

import logging

from fastapi import FastAPI
from prometheus_client import Counter, Gauge, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

from fitcoach.configs.config import AppConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Chat session metrics
# ---------------------------------------------------------------------------

CHAT_SESSIONS_ACTIVE = Gauge(
    "fitcoach_chat_sessions_active",
    "Number of streaming chat replies currently in progress",
    ["service"],
)

CHAT_SESSIONS_TOTAL = Counter(
    "fitcoach_chat_sessions_total",
    "Total number of streamed chat replies, by outcome code",
    ["service", "status"],
)

CHAT_SESSION_DURATION_SECONDS = Histogram(
    "fitcoach_chat_session_duration_seconds",
    "End-to-end duration of a streamed chat reply",
    ["service"],
    buckets=(0.5, 1, 2, 5, 10, 30, 60, 120, 300),
)

STREAM_EVENTS_TOTAL = Counter(
    "fitcoach_stream_events_total",
    "Total stream events emitted, by event type",
    ["service", "event_type"],  # started | content | error
)

SSE_STREAM_OUTCOMES_TOTAL = Counter(
    "fitcoach_sse_stream_outcomes_total",
    "SSE stream terminations by outcome code",
    ["code"],
)

# ---------------------------------------------------------------------------
# Context selection
# ---------------------------------------------------------------------------

CONTEXT_MESSAGES_SELECTED = Histogram(
    "fitcoach_context_messages_selected",
    "Number of past messages sent to the model with a chat message",
    buckets=(0, 1, 2, 3, 5, 10, 20, 50),
)

# ---------------------------------------------------------------------------
# Programs
# ---------------------------------------------------------------------------

PROGRAM_CUSTOMIZATIONS_TOTAL = Counter(
    "fitcoach_program_customizations_total",
    "Program customization requests by outcome",
    ["status"],  # "ok" | "error"
)

PDF_RENDERS_TOTAL = Counter(
    "fitcoach_pdf_renders_total",
    "Program PDF renders by outcome",
    ["status"],  # "ok" | "error"
)

PDF_RENDER_SECONDS = Histogram(
    "fitcoach_pdf_render_seconds",
    "Time spent rendering a program PDF",
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)


def setup_metrics(app: FastAPI, config: AppConfig) -> None:
    """Attach HTTP instrumentation and the ``/metrics`` endpoint to *app*.

    Must run before the app starts serving: the instrumentator adds a
    middleware.
    """
    Instrumentator(
        excluded_handlers=config.tracing.excluded_urls,
    ).instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)
    logger.info("Prometheus metrics initialised")
