"""Catalog search and ingestion helpers."""

from .models import (
    AggregatedSearchResponse,
    AuthorReference,
    BookCandidate,
    BookCreate,
    InlineAuthor,
    ProviderStatusSnapshot,
    ReWaListAdd,
    VideoCandidate,
    VideoCreate,
)
from .extraction import (
    book_payload_from_candidate,
    extract_release_year,
    find_isbn,
    published_year,
    video_payload_from_candidate,
)
from .providers import CatalogProvider, GoogleBooksProvider, ImdbProvider
from .aggregator import SearchAggregator

__all__ = [
    "AggregatedSearchResponse",
    "AuthorReference",
    "BookCandidate",
    "BookCreate",
    "InlineAuthor",
    "ProviderStatusSnapshot",
    "ReWaListAdd",
    "VideoCandidate",
    "VideoCreate",
    "book_payload_from_candidate",
    "extract_release_year",
    "find_isbn",
    "published_year",
    "video_payload_from_candidate",
    "CatalogProvider",
    "GoogleBooksProvider",
    "ImdbProvider",
    "SearchAggregator",
]
