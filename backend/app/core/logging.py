"""
Logging Infrastructure
======================

structlog setup shared by the API and the account service.

Every entry carries the request ID of the HTTP request that produced it,
so a CREATE USER, its GRANT and any server error can be followed
together. Secret-bearing keys (passwords) are masked before rendering.
"""

from __future__ import annotations

import logging
import sys
import time
from contextvars import ContextVar
from functools import wraps
from typing import Any, Callable, Optional, TypeVar, ParamSpec

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from app.core.config import Settings, get_settings

# Set by the request-context middleware for the duration of a request
request_id_context: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

SECRET_KEYS = frozenset({"password", "identified_by", "db_password"})
MASK = "***"

P = ParamSpec("P")
R = TypeVar("R")


def add_request_id(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    request_id = request_id_context.get()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def mask_secrets(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Replace the value of any secret-bearing key with a fixed mask."""
    for key in SECRET_KEYS.intersection(event_dict):
        event_dict[key] = MASK
    return event_dict


def get_log_level(settings: Settings) -> int:
    """Numeric level for LOG_LEVEL; unknown names fall back to INFO."""
    return logging.getLevelNamesMapping().get(settings.LOG_LEVEL.upper(), logging.INFO)


def get_processors(settings: Settings) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_request_id,
        mask_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    return processors


def configure_logging() -> None:
    """
    Configure structlog and the stdlib root logger.

    uvicorn's access log is silenced because the request-context
    middleware already logs every request with its ID. SQLAlchemy engine
    logging follows DEBUG.
    """
    settings = get_settings()
    level = get_log_level(settings)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DEBUG else logging.WARNING
    )

    structlog.configure(
        processors=get_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Logger for a module. Events are snake_case names with keyword fields:

        logger.info("mysql_user_created", username="alice", host="localhost")
    """
    return structlog.get_logger(name)


def log_execution_time(
    log: structlog.stdlib.BoundLogger,
    operation: str,
    **extra_fields: Any
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Log how long a server round trip took, at debug level.

    The entry is ``<operation>_timed`` with ``duration_ms`` and ``success``.
    Failures are re-raised untouched; reporting them is left to the caller.
    """
    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start_time = time.perf_counter()
            success = False
            try:
                result = func(*args, **kwargs)
                success = True
                return result
            finally:
                log.debug(
                    f"{operation}_timed",
                    duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                    success=success,
                    **extra_fields
                )
        return wrapper
    return decorator
