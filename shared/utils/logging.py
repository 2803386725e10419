"""
Structured Logging for Caliber

Every module logs through structlog so API requests, matrix builds and
worker tasks share one JSON format and one set of context keys.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from shared.utils.config import get_settings

_configured = False


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def setup_logging(force: bool = False) -> None:
    """
    Configure structured logging for the application.

    Safe to call from every entrypoint (API, worker, scripts); only the
    first call takes effect unless ``force`` is set.
    """
    global _configured
    if _configured and not force:
        return

    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    processors = _shared_processors()
    if settings.debug:
        # Pretty console output for development
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    # Library loggers (uvicorn, sqlalchemy, celery) stay on stdlib logging
    logging.basicConfig(stream=sys.stdout, level=level, format="%(message)s")
    _configured = True


def get_logger(name: str, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a structured logger with initial context.

    Args:
        name: Logger name (typically __name__ or service name)
        **initial_context: Context bound to all entries of this logger

    Returns:
        Bound structlog logger
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


def bind_request_context(request_id: str, **extra: Any) -> None:
    """Bind request context for all subsequent log calls in this context."""
    structlog.contextvars.bind_contextvars(request_id=request_id, **extra)


def bind_task_context(task_id: str, task_name: str, **extra: Any) -> None:
    """Bind Celery task context for worker logs."""
    structlog.contextvars.bind_contextvars(
        task_id=task_id,
        task_name=task_name,
        **extra,
    )


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
