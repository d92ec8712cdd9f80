"""Search aggregation across the book and video catalogs."""

import asyncio
import logging
import os
from typing import Dict, List, Optional, Tuple

from catalog.executors import run_provider_with_status
from catalog.models import AggregatedSearchResponse, ProviderStatusSnapshot
from catalog.providers import CatalogProvider, GoogleBooksProvider, ImdbProvider
from observability.metrics import catalog_searches_total

logger = logging.getLogger(__name__)

VIDEO_RESULT_LIMIT = 10

try:
    PROVIDER_TIMEOUT_SECONDS = float(os.getenv("CATALOG_PROVIDER_TIMEOUT_SECONDS", "8.0"))
except ValueError:
    PROVIDER_TIMEOUT_SECONDS = 8.0


class SearchAggregator:
    """
    Fans one search term out to the book and video providers.

    Either provider may be None (not configured); its category then comes
    back empty with a "disabled" status.
    """

    def __init__(
        self,
        book_provider: Optional[CatalogProvider],
        video_provider: Optional[CatalogProvider],
        *,
        timeout_seconds: float = PROVIDER_TIMEOUT_SECONDS,
        video_limit: int = VIDEO_RESULT_LIMIT,
    ):
        self.providers: Dict[str, Optional[CatalogProvider]] = {
            "books": book_provider,
            "videos": video_provider,
        }
        self.timeout_seconds = timeout_seconds
        self.video_limit = video_limit

    @classmethod
    def from_env(cls) -> "SearchAggregator":
        imdb_key = os.getenv("IMDB_API_KEY")
        if not imdb_key:
            logger.info("IMDB_API_KEY not set; video search disabled")
        return cls(
            GoogleBooksProvider(api_key=os.getenv("GOOGLE_BOOKS_API_KEY")),
            ImdbProvider(imdb_key) if imdb_key else None,
        )

    async def _search_category(
        self, category: str, term: str
    ) -> Tuple[str, List, ProviderStatusSnapshot]:
        provider = self.providers[category]
        if provider is None:
            return category, [], ProviderStatusSnapshot(
                provider_id=category, status="disabled", message="Provider not configured"
            )
        results, status = await run_provider_with_status(
            provider.provider_id, provider, term, timeout_seconds=self.timeout_seconds
        )
        return category, results, status

    async def search(self, term: str) -> AggregatedSearchResponse:
        term = (term or "").strip()
        if not term:
            catalog_searches_total.labels(outcome="empty_term").inc()
            return AggregatedSearchResponse()
        catalog_searches_total.labels(outcome="searched").inc()

        task_results = await asyncio.gather(
            *(self._search_category(category, term) for category in self.providers)
        )

        response = AggregatedSearchResponse()
        for category, results, status in task_results:
            response.provider_statuses.append(status)
            if category == "books":
                response.books = list(results)
            else:
                response.videos = list(results)[: self.video_limit]

        logger.info(
            "Search %r: %d books, %d videos",
            term, len(response.books), len(response.videos),
        )
        return response
