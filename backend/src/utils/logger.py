"""Structured logging setup built on structlog."""

import logging
import sys
from typing import Optional

import structlog
from structlog._config import BoundLoggerLazyProxy
from structlog.contextvars import bind_contextvars, clear_contextvars, get_contextvars


def configure_logging(log_level: str = "INFO", debug: bool = False, json_logs: bool = True) -> None:
    """
    Configure structlog and the stdlib root logger.

    Debug mode renders colourised console output; otherwise each event is
    emitted as a single JSON line.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if debug or not json_logs:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    # SQLAlchemy echo is controlled by settings.sql_echo
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None):
    """
    Get a structlog logger tagged with the given module name.

    The name is an initial value on the lazy proxy, so it is only bound on
    first use, after configure_logging has run.
    """
    if name is None:
        return structlog.get_logger()
    # structlog.get_logger(logger=...) collides with wrap_logger's `logger`
    # parameter, so build the lazy proxy with the initial value directly.
    return BoundLoggerLazyProxy(None, initial_values={"logger": name}, logger_factory_args=())


def set_request_id(request_id: str) -> None:
    """Bind request id to the current context for all subsequent log events."""
    clear_contextvars()
    bind_contextvars(request_id=request_id)


def get_request_id() -> Optional[str]:
    return get_contextvars().get("request_id")


def clear_request_context() -> None:
    clear_contextvars()
