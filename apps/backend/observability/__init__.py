"""
Observability for the ReWa List backend: structured logging with request
ids, Prometheus metrics, Sentry and readiness checks.
"""

from .logging import bind_user, get_logger, get_request_id, request_context
from .metrics import (
    metrics_registry,
    http_requests_total,
    catalog_provider_duration_seconds,
    catalog_provider_errors_total,
    business_events_total,
)

__all__ = [
    "bind_user",
    "get_logger",
    "get_request_id",
    "request_context",
    "metrics_registry",
    "http_requests_total",
    "catalog_provider_duration_seconds",
    "catalog_provider_errors_total",
    "business_events_total",
]
