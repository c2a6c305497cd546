# wikiportraits/shared/logging_config.py
import logging
import sys

import structlog
from opentelemetry import trace

from wikiportraits import __version__
from wikiportraits.shared.config import settings

# Chatty below WARNING: one line per request to the Wikimedia APIs
QUIET_LOGGERS = ("httpx", "httpcore")


def add_service_context(_, __, event_dict):
    """Stamps which deployment wrote the line. Explicit fields win."""
    event_dict.setdefault("service", settings.OTEL_SERVICE_NAME)
    event_dict.setdefault("env", settings.APP_ENV.value)
    event_dict.setdefault("version", __version__)
    return event_dict


def add_trace_ids(_, __, event_dict):
    """Adds trace_id/span_id while a span is recording; lines outside a request get none."""
    span = trace.get_current_span()
    if span.is_recording():
        ctx = span.get_span_context()
        event_dict["trace_id"] = format(ctx.trace_id, "032x")
        event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict


def build_processors(json_output: bool):
    processors = [
        structlog.contextvars.merge_contextvars,
        add_service_context,
        add_trace_ids,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    processors.append(structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer())
    return processors


def configure_logging():
    """
    Configures structlog and stdlib logging.

    JSON lines when LOG_FORMAT is "json" (deployments), coloured console
    output otherwise. Every line carries service, env and version, and
    LOG_LEVEL filters structlog calls as well as stdlib ones.
    """
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=build_processors(settings.LOG_FORMAT == "json"),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Uvicorn and httpx log through the stdlib
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
