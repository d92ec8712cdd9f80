from abc import ABC, abstractmethod
from typing import List, Optional
import logging

import httpx
from pydantic import ValidationError as PydanticValidationError

from catalog.models import BookCandidate, VideoCandidate
from exceptions import SearchProviderError

logger = logging.getLogger(__name__)

GOOGLE_BOOKS_API_URL = "https://www.googleapis.com/books/v1/volumes"
IMDB_API_URL = "https://imdb-api.com/API/AdvancedSearch"


class CatalogProvider(ABC):
    provider_id: str = "unknown"

    @abstractmethod
    async def search(self, term: str) -> List:
        pass

    async def _get_json(self, url: str, params: Optional[dict] = None, timeout: float = 10.0) -> dict:
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            raise SearchProviderError(
                f"{self.provider_id} returned {e.response.status_code}",
                provider=self.provider_id,
            ) from e
        except httpx.HTTPError as e:
            raise SearchProviderError(
                f"{self.provider_id} request failed: {type(e).__name__}",
                provider=self.provider_id,
            ) from e


class GoogleBooksProvider(CatalogProvider):
    """Google Books volume search. The API key is optional for low volumes."""

    provider_id = "google_books"

    def __init__(self, api_key: Optional[str] = None, max_results: int = 10):
        self.api_key = api_key
        self.max_results = max_results
        self.base_url = GOOGLE_BOOKS_API_URL

    async def search(self, term: str) -> List[BookCandidate]:
        params = {"q": term, "maxResults": self.max_results}
        if self.api_key:
            params["key"] = self.api_key

        data = await self._get_json(self.base_url, params=params)

        results: List[BookCandidate] = []
        for item in data.get("items") or []:
            try:
                candidate = BookCandidate.model_validate(item)
            except PydanticValidationError as e:
                logger.debug("Skipping malformed Google Books item %s: %s", item.get("id"), e)
                continue
            # Untitled volumes cannot become a book
            if not candidate.volumeInfo.title.strip():
                logger.debug("Skipping untitled Google Books item %s", candidate.id)
                continue
            results.append(candidate)
        return results


class ImdbProvider(CatalogProvider):
    """IMDb-API advanced title search."""

    provider_id = "imdb"

    def __init__(self, api_key: str):
        self.api_key = api_key
        self.base_url = IMDB_API_URL

    async def search(self, term: str) -> List[VideoCandidate]:
        data = await self._get_json(f"{self.base_url}/{self.api_key}", params={"title": term})

        # IMDb-API reports quota and key problems in-band with a 200 status
        error_message = data.get("errorMessage")
        if error_message:
            raise SearchProviderError(error_message, provider=self.provider_id)

        results: List[VideoCandidate] = []
        for item in data.get("results") or []:
            try:
                candidate = VideoCandidate.model_validate(item)
            except PydanticValidationError as e:
                logger.debug("Skipping malformed IMDb item %s: %s", item.get("id"), e)
                continue
            if not candidate.title.strip():
                logger.debug("Skipping untitled IMDb item %s", candidate.id)
                continue
            results.append(candidate)
        return results
