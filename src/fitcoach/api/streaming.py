"""Reusable SSE streaming infrastructure.

Wraps an async generator of domain ``StreamEvent`` objects into an SSE
text stream with a wall-clock timeout, an error boundary, metrics and a
tracing span, so business logic never formats SSE or catches errors.
"""

import asyncio
import json
import logging
import time
from collections import Counter as EventCounter
from collections.abc import AsyncGenerator
from datetime import timedelta

from openai import APIConnectionError

from fitcoach.core.service.metrics import (
    CHAT_SESSION_DURATION_SECONDS,
    CHAT_SESSIONS_ACTIVE,
    CHAT_SESSIONS_TOTAL,
    SSE_STREAM_OUTCOMES_TOTAL,
    STREAM_EVENTS_TOTAL,
)
from fitcoach.core.service.models import ErrorEvent, StreamEvent
from fitcoach.infra.telemetry import (
    ATTR_SSE_ERROR_CODE,
    ATTR_SSE_EVENT_COUNTS,
    ATTR_SSE_SERVICE,
    SPAN_SSE_STREAM,
    tracer,
)

from .models import format_error_sse, format_sse

logger = logging.getLogger(__name__)

SSE_MEDIA_TYPE = "text/event-stream"
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


async def sse_stream(
    events: AsyncGenerator[StreamEvent, None],
    *,
    request_timeout: timedelta,
    service_name: str = "",
    send_traceback: bool = False,
) -> AsyncGenerator[str, None]:
    """Format domain events as SSE with timeout, error handling and metrics.

    Parameters
    ----------
    events:
        Async generator of ``StreamEvent`` instances.
    request_timeout:
        Wall-clock limit for the whole stream.
    service_name:
        ``service`` label for Prometheus metrics.
    send_traceback:
        Include the traceback in ``PROCESSING_ERROR`` events.

    Yields
    ------
    SSE-formatted strings (``data: {...}\\n\\n``).
    """
    with tracer.start_as_current_span(SPAN_SSE_STREAM) as span:
        span.set_attribute(ATTR_SSE_SERVICE, service_name)
        code = "ok"
        event_counts: EventCounter[str] = EventCounter()
        CHAT_SESSIONS_ACTIVE.labels(service=service_name).inc()
        start = time.monotonic()
        try:
            async with asyncio.timeout(request_timeout.total_seconds()):
                async for event in events:
                    event_counts[event.type] += 1
                    STREAM_EVENTS_TOTAL.labels(
                        service=service_name, event_type=event.type
                    ).inc()
                    yield format_sse(event)

        except APIConnectionError:
            code = "MODEL_UNREACHABLE"
            logger.warning("Chat model unreachable.")
            yield format_sse(
                ErrorEvent(
                    message="Model is temporarily unavailable. Please try again later.",
                    code=code,
                )
            )
        except TimeoutError:
            code = "REQUEST_TIMEOUT"
            logger.warning("Request timed out after %s.", request_timeout)
            yield format_sse(ErrorEvent(message="Request timed out.", code=code))
        except asyncio.CancelledError:
            code = "CANCELLED"
            raise
        except Exception as e:
            code = "PROCESSING_ERROR"
            span.record_exception(e)
            logger.warning("Unexpected error in SSE stream", exc_info=True)
            yield format_error_sse(e, send_traceback=send_traceback)
        finally:
            span.set_attribute(ATTR_SSE_ERROR_CODE, code)
            span.set_attribute(ATTR_SSE_EVENT_COUNTS, json.dumps(event_counts))
            SSE_STREAM_OUTCOMES_TOTAL.labels(code=code).inc()
            CHAT_SESSIONS_ACTIVE.labels(service=service_name).dec()
            CHAT_SESSIONS_TOTAL.labels(service=service_name, status=code).inc()
            CHAT_SESSION_DURATION_SECONDS.labels(service=service_name).observe(
                time.monotonic() - start
            )
