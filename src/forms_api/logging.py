"""Structured logging configuration using structlog."""

import logging
import sys

import structlog

from forms_api.config import Settings

_QUIET_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def configure_logging(settings: Settings) -> None:
    """Configure structlog and route stdlib logging through stdout.

    Emits JSON lines unless ``settings.log_json`` is off, in which case the
    structlog console renderer is used for local development. Per-request
    ``rest_request_*`` events are logged at debug level and only show up
    when ``settings.debug`` is set.

    Args:
        settings: Application settings.
    """
    level = logging.DEBUG if settings.debug else logging.INFO
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(app=settings.application_name)

    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True
