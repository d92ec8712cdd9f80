"""Request middleware: request ids, access logging and HTTP metrics."""

import re
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .logging import get_logger, request_context
from .metrics import (
    http_requests_total,
    http_request_duration_seconds,
    http_requests_in_progress,
)

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
SLOW_REQUEST_SECONDS = 2.0
QUIET_PREFIXES = ("/health", "/metrics")

# Catalog ids are uuid4 hex strings; list entry ids are integers
_ID_SEGMENT_RE = re.compile(r"/(?:[0-9a-f]{32}|\d+)(?=/|$)", re.IGNORECASE)


def route_label(path: str) -> str:
    """Collapse id path segments so metric label cardinality stays bounded."""
    return _ID_SEGMENT_RE.sub("/{id}", path)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """
    Runs each request inside a request-id context (taken from X-Request-ID or
    X-Correlation-ID when the caller sends one) and echoes the id back.
    Health and metrics requests are measured but not logged.
    """

    def __init__(self, app: ASGIApp, enable_request_logging: bool = True):
        super().__init__(app)
        self.enable_request_logging = enable_request_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming_id = request.headers.get(REQUEST_ID_HEADER) or request.headers.get("X-Correlation-ID")
        method = request.method
        endpoint = route_label(request.url.path)
        log_request = self.enable_request_logging and not request.url.path.startswith(QUIET_PREFIXES)

        with request_context(incoming_id) as request_id:
            request.state.correlation_id = request_id
            in_progress = http_requests_in_progress.labels(method=method, endpoint=endpoint)
            in_progress.inc()
            started = time.perf_counter()
            status_code = 500
            try:
                response = await call_next(request)
                status_code = response.status_code
                response.headers[REQUEST_ID_HEADER] = request_id
                return response
            except Exception:
                logger.error(
                    "Unhandled error in %s %s", method, endpoint,
                    extra={"method": method, "path": endpoint},
                    exc_info=True,
                )
                raise
            finally:
                duration = time.perf_counter() - started
                in_progress.dec()
                http_requests_total.labels(method=method, endpoint=endpoint, status=status_code).inc()
                http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)

                if log_request:
                    logger.info(
                        "%s %s -> %s",
                        method, endpoint, status_code,
                        extra={
                            "method": method,
                            "path": endpoint,
                            "status_code": status_code,
                            "duration_seconds": round(duration, 3),
                        },
                    )
                    if duration > SLOW_REQUEST_SECONDS:
                        logger.warning(
                            "Slow request %s %s took %.2fs", method, endpoint, duration,
                        )
