"""Structured logging setup."""

import logging
import sys

import structlog

from src.core.config import settings


def _add_request_id(logger, method_name: str, event_dict: dict) -> dict:
    """Attach the current request ID when the event doesn't carry one."""
    from src.presentation.middleware.request_context import get_request_id

    if "request_id" not in event_dict:
        request_id = get_request_id()
        if request_id:
            event_dict["request_id"] = request_id
    return event_dict


def setup_logging() -> None:
    """
    Configure structlog and the standard library root logger.

    Uses a JSON renderer unless ``log_format`` is ``console``.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.debug else logging.WARNING
    )

    if settings.log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            _add_request_id,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
