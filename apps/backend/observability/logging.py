"""
Structured logging for the ReWa List backend.

Every record carries the request id of the HTTP request that produced it and,
once the bearer token has been resolved, the caller's user id.

Usage:
    from observability import get_logger

    logger = get_logger(__name__)
    logger.info("Book created", extra={"book_id": book.id, "author_count": 2})
"""

import logging
import os
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, List, Optional

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "rewalist-backend"

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_user_id: ContextVar[Optional[int]] = ContextVar("user_id", default=None)

# The IMDb key is part of the request path, so it can leak through URLs and
# exception messages unless its value is scrubbed.
SECRET_ENV_VARS = ("IMDB_API_KEY", "GOOGLE_BOOKS_API_KEY", "SENTRY_DSN")
REDACTED = "[REDACTED]"


def get_request_id() -> Optional[str]:
    return _request_id.get()


def bind_user(user_id: Optional[int]) -> None:
    """Attach the authenticated user to log records for the rest of the request."""
    _user_id.set(user_id)


@contextmanager
def request_context(request_id: Optional[str] = None) -> Iterator[str]:
    """Scope a request id (generated when missing) to the enclosed block."""
    request_id = request_id or f"req-{uuid.uuid4().hex[:16]}"
    request_token = _request_id.set(request_id)
    user_token = _user_id.set(None)
    try:
        yield request_id
    finally:
        _user_id.reset(user_token)
        _request_id.reset(request_token)


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = _request_id.get() or "none"
        record.user_id = _user_id.get()
        return True


class SecretRedactionFilter(logging.Filter):
    """Scrub API key values from messages and mask credential-like extra fields."""

    SENSITIVE_FIELDS = frozenset({"authorization", "token", "session_token", "api_key", "secret"})

    def __init__(self, secrets: Optional[List[str]] = None):
        super().__init__()
        if secrets is None:
            secrets = [os.getenv(name) for name in SECRET_ENV_VARS]
        self.secrets = [s for s in secrets if s]

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self._scrub(record.msg)
        if isinstance(record.args, dict):
            record.args = {k: self._mask(k, v) for k, v in record.args.items()}
        elif record.args:
            record.args = tuple(self._scrub(arg) for arg in record.args)

        for field in self.SENSITIVE_FIELDS & set(record.__dict__):
            setattr(record, field, REDACTED)
        return True

    def _mask(self, key: Any, value: Any) -> Any:
        return REDACTED if str(key).lower() in self.SENSITIVE_FIELDS else self._scrub(value)

    def _scrub(self, value: Any) -> Any:
        if not self.secrets or not isinstance(value, str):
            return value
        for secret in self.secrets:
            value = value.replace(secret, REDACTED)
        return value


class ServiceJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["service"] = SERVICE_NAME
        log_record["environment"] = os.getenv("ENVIRONMENT", "development")
        if getattr(record, "user_id", None) is not None:
            log_record["user_id"] = record.user_id


def _build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return ServiceJsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(correlation_id)s %(message)s",
            rename_fields={"asctime": "@timestamp"},
        )
    return logging.Formatter(
        "%(asctime)s %(levelname)-8s [%(correlation_id)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def setup_logging() -> None:
    """
    Install one stderr handler on the root logger.

    LOG_LEVEL picks the level (default INFO). LOG_FORMAT is "json" or "text";
    it defaults to json when ENVIRONMENT=production.
    """
    default_format = "json" if os.getenv("ENVIRONMENT") == "production" else "text"
    log_format = os.getenv("LOG_FORMAT", default_format).lower()

    handler = logging.StreamHandler()
    handler.setFormatter(_build_formatter(log_format))
    handler.addFilter(RequestContextFilter())
    handler.addFilter(SecretRedactionFilter())

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

    for noisy in ("uvicorn.access", "sqlalchemy.engine", "aiosqlite"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    # httpx logs full request URLs at INFO, IMDb key included
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


setup_logging()
