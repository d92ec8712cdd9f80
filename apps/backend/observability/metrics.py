"""
Prometheus metrics for the ReWa List backend.

HTTP traffic is measured by the middleware; catalog searches and list
changes are counted where they happen.
"""

from prometheus_client import Counter, Gauge, Histogram, REGISTRY

metrics_registry = REGISTRY

LATENCY_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
PROVIDER_LATENCY_BUCKETS = (0.1, 0.25, 0.5, 1.0, 2.0, 4.0, 8.0, 16.0)

# HTTP
http_requests_total = Counter(
    "http_requests_total",
    "HTTP requests by method, route and status",
    ["method", "endpoint", "status"],
    registry=metrics_registry,
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
    buckets=LATENCY_BUCKETS,
    registry=metrics_registry,
)
http_requests_in_progress = Gauge(
    "http_requests_in_progress",
    "HTTP requests currently being served",
    ["method", "endpoint"],
    registry=metrics_registry,
)

# Catalog search
catalog_searches_total = Counter(
    "catalog_searches_total",
    "Search requests; outcome is 'empty_term' or 'searched'",
    ["outcome"],
    registry=metrics_registry,
)
catalog_provider_duration_seconds = Histogram(
    "catalog_provider_duration_seconds",
    "Latency of successful catalog provider calls",
    ["provider"],
    buckets=PROVIDER_LATENCY_BUCKETS,
    registry=metrics_registry,
)
catalog_provider_errors_total = Counter(
    "catalog_provider_errors_total",
    "Failed or timed-out catalog provider calls",
    ["provider", "error_type"],
    registry=metrics_registry,
)
catalog_provider_results = Histogram(
    "catalog_provider_results",
    "Candidates returned per provider call",
    ["provider"],
    buckets=(0, 1, 5, 10, 20, 40),
    registry=metrics_registry,
)

# Library
business_events_total = Counter(
    "business_events_total",
    "Library changes: book_created, video_created, rewalist_item_added",
    ["event_type"],
    registry=metrics_registry,
)
unresolved_authors_total = Counter(
    "unresolved_authors_total",
    "Author references that matched no stored author, by policy applied",
    ["policy"],
    registry=metrics_registry,
)
