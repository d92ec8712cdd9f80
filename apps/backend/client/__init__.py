"""Async client for the ReWa List backend, including the search widget flow."""

from .api import ApiError, ReWaApiClient
from .cache import QueryCache
from .debounce import Debouncer
from .widget import IngestionError, IngestionResult, SearchWidget, WidgetState

__all__ = [
    "ApiError",
    "ReWaApiClient",
    "QueryCache",
    "Debouncer",
    "IngestionError",
    "IngestionResult",
    "SearchWidget",
    "WidgetState",
]
