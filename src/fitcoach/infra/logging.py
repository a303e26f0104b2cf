"""Root logger bootstrap.

Every ``logging.getLogger(__name__)`` in the app and in uvicorn ends up
on one stdout handler that writes either JSON lines (for log shipping)
or coloured, timestamp-prefixed lines for local development.  The
current OpenTelemetry trace and span IDs are attached to each record.
"""

from __future__ import annotations

import logging
import sys

from opentelemetry import trace

from fitcoach.configs.system import LoggingConfig

_DEV_FORMAT = "%(levelprefix)s %(asctime)s %(name)s  %(message)s"
_DEV_DATEFMT = "%H:%M:%S"

_JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "opentelemetry")


class TraceContextFilter(logging.Filter):
    """Adds ``trace_id`` / ``span_id`` (empty outside a span) to records."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = trace.get_current_span().get_span_context()
        if ctx and ctx.is_valid:
            record.trace_id = format(ctx.trace_id, "032x")  # type: ignore[attr-defined]
            record.span_id = format(ctx.span_id, "016x")  # type: ignore[attr-defined]
        else:
            record.trace_id = ""  # type: ignore[attr-defined]
            record.span_id = ""  # type: ignore[attr-defined]
        return True


def _build_formatter(json_output: bool) -> logging.Formatter:
    if json_output:
        from pythonjsonlogger.json import JsonFormatter

        return JsonFormatter(
            fmt=_JSON_FORMAT,
            rename_fields={
                "asctime": "timestamp",
                "levelname": "level",
                "name": "logger",
            },
            defaults={"trace_id": "", "span_id": ""},
        )

    from uvicorn.logging import DefaultFormatter

    return DefaultFormatter(fmt=_DEV_FORMAT, datefmt=_DEV_DATEFMT, use_colors=True)


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure the root logger; call once before the app starts."""
    if config is None:
        config = LoggingConfig()

    root = logging.getLogger()
    root.setLevel(config.level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(TraceContextFilter())
    handler.setFormatter(_build_formatter(config.json_output))

    root.handlers = [handler]

    for name in _UVICORN_LOGGERS:
        uvi = logging.getLogger(name)
        uvi.handlers = [handler]
        uvi.propagate = False

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
