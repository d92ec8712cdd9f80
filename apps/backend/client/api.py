"""HTTP client for the ReWa List backend."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from catalog.models import AggregatedSearchResponse, BookCreate, VideoCreate

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class ApiError(Exception):
    """Non-2xx response from the backend."""

    def __init__(self, status_code: int, body: Any, *, operation: str = ""):
        self.status_code = status_code
        self.body = body
        self.operation = operation
        message = body.get("message") if isinstance(body, dict) else None
        super().__init__(f"{operation or 'request'} failed with {status_code}: {message or body}")


class ReWaApiClient:
    """
    Thin async wrapper over the backend routes.

    Pass ``client`` to reuse an existing ``httpx.AsyncClient`` (tests hand in
    one bound to the app through ``ASGITransport``); it is then left open on
    ``aclose``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: Optional[str] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.token = token
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "ReWaApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def _request(self, operation: str, method: str, path: str, **kwargs) -> Any:
        response = await self._client.request(method, path, headers=self._headers(), **kwargs)
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            logger.warning("%s failed: %s", operation, response.status_code)
            raise ApiError(response.status_code, body, operation=operation)
        return response.json()

    async def search_item(self, term: str) -> AggregatedSearchResponse:
        data = await self._request("search", "GET", "/search", params={"term": term})
        return AggregatedSearchResponse.model_validate(data)

    async def create_book(self, payload: BookCreate) -> Dict[str, Any]:
        return await self._request(
            "create_book", "POST", "/books",
            json=payload.model_dump(by_alias=True, exclude_none=True),
        )

    async def create_video(self, payload: VideoCreate) -> Dict[str, Any]:
        return await self._request(
            "create_video", "POST", "/videos",
            json=payload.model_dump(by_alias=True, exclude_none=True),
        )

    async def add_to_rewalist(self, item_id: str, item_type: str) -> Dict[str, Any]:
        return await self._request(
            "add_to_rewalist", "POST", "/rewalist/items",
            json={"id": item_id, "type": item_type},
        )

    async def get_rewalist(self) -> List[Dict[str, Any]]:
        return await self._request("get_rewalist", "GET", "/rewalist")
