"""
Logging configuration for the ordering platform.

Every record carries the ID of the HTTP request it was emitted under
(`-` outside a request), so storefront and admin traffic can be followed
through the availability and access services.

Usage:
    from resto_ordering.logging_config import setup_logging
    setup_logging()  # Call once at application startup

Environment variables:
    LOG_LEVEL: Set to DEBUG, INFO, WARNING, ERROR, or CRITICAL (default: INFO)
"""
import logging
import os
import sys
from contextvars import ContextVar, Token
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"
NO_REQUEST_ID = "-"
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Third-party loggers that only matter when debugging
NOISY_LOGGERS = ("httpx", "sqlalchemy.engine", "uvicorn.access")

# Set by RequestIDMiddleware for the duration of a request
_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def set_request_id(request_id: Optional[str]) -> Token:
    """Bind a request ID to the current context; returns the reset token."""
    return _request_id.set(request_id)


def reset_request_id(token: Token) -> None:
    _request_id.reset(token)


def get_request_id() -> Optional[str]:
    return _request_id.get()


class RequestIDFilter(logging.Filter):
    """Stamps record.request_id from the current request context."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = _request_id.get() or NO_REQUEST_ID
        return True


def _resolve_level(level: Optional[str]) -> str:
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    level = level.upper()
    return level if level in VALID_LEVELS else "INFO"


def setup_logging(level: str = None) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If not provided, reads from LOG_LEVEL env var, defaults to INFO.
    """
    level = _resolve_level(level)
    numeric_level = getattr(logging, level)

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )

    # basicConfig is a no-op once handlers exist (uvicorn, pytest)
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIDFilter) for f in handler.filters):
            handler.addFilter(RequestIDFilter())

    logging.getLogger("resto_ordering").setLevel(numeric_level)

    if level != "DEBUG":
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug("Logging configured at %s level", level)
