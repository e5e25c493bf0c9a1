"""Structured logging for the search service.

Events are rendered as JSON outside development. Every event emitted while a
request is in flight carries its ``request_id``; the search route and the
auth dependency add ``resource``, ``principal_id`` and ``role`` through
``structlog.contextvars`` so store and engine events need not repeat them.
"""

import logging
import re
import sys
import uuid
from typing import Any, cast

import structlog

from scopedsearch.config import Settings, get_settings

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

# Third-party loggers and the level they are held at
QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "asyncpg": logging.WARNING,
}


def log_level_for(settings: Settings) -> int:
    if settings.app_debug:
        return logging.DEBUG
    return logging.getLevelNamesMapping()[settings.log_level]


def renderer_for(settings: Settings) -> str:
    """Explicit LOG_FORMAT wins; otherwise console in development, JSON elsewhere."""
    if settings.log_format is not None:
        return settings.log_format
    return "console" if settings.is_development else "json"


def build_processors(settings: Settings) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if renderer_for(settings) == "json":
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def setup_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the standard library root logger."""
    settings = settings or get_settings()
    level = log_level_for(settings)

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)
    # Emitted SQL is only useful when diagnosing a query
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.log_sql else logging.WARNING
    )


def request_id_from(header: str | None) -> str:
    """Forward a well-formed client request id, otherwise mint one."""
    if header and _REQUEST_ID_PATTERN.match(header.strip()):
        return header.strip()
    return uuid.uuid4().hex


def bind_request_context(request_id: str, path: str) -> None:
    """Start a fresh logging context for one HTTP request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, path=path)


def bind_search_context(**values: Any) -> None:
    """Add search identifiers (resource, principal) to the current context."""
    structlog.contextvars.bind_contextvars(
        **{key: str(value) for key, value in values.items() if value is not None}
    )


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
