"""
Search widget orchestration.

Free text is debounced into a committed term, the term drives a cached
catalog search, and picking a result runs create then link against the
backend. The list view is refetched only after a successful link.

States: idle -> typing -> querying -> results_shown, and selecting while a
picked result is being ingested. Selecting resets the term, so the widget
returns to idle once the sequence ends.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx
from pydantic import ValidationError as PayloadError

from catalog.extraction import book_payload_from_candidate, video_payload_from_candidate
from catalog.models import BookCandidate, ProviderStatusSnapshot, VideoCandidate
from client.api import ApiError, ReWaApiClient
from client.cache import QueryCache
from client.debounce import Debouncer

logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 0.5
REWALIST_QUERY = "rewalist"
SEARCH_QUERY = "search"

_REQUEST_ERRORS = (ApiError, httpx.HTTPError)
# A candidate that does not make a valid create payload fails like a rejected create
_CREATE_ERRORS = _REQUEST_ERRORS + (PayloadError,)


class WidgetState(str, enum.Enum):
    IDLE = "idle"
    TYPING = "typing"
    QUERYING = "querying"
    RESULTS_SHOWN = "results_shown"
    SELECTING = "selecting"


class IngestionError(Exception):
    """
    A create -> link sequence that stopped part way.

    ``phase`` is "create" or "link". When the link failed, ``item_id`` is the
    catalog item that was created but is not on the list; ``retry_link`` can
    finish the job without creating it again.
    """

    def __init__(self, phase: str, item_type: str, item_id: Optional[str] = None):
        self.phase = phase
        self.item_type = item_type
        self.item_id = item_id
        super().__init__(f"{item_type} {phase} failed" + (f" (created {item_id})" if item_id else ""))


@dataclass
class IngestionResult:
    item_type: str
    item_id: str
    item: Dict[str, Any]
    entry: Dict[str, Any] = field(default_factory=dict)


class SearchWidget:
    def __init__(
        self,
        api: ReWaApiClient,
        *,
        cache: Optional[QueryCache] = None,
        debounce_seconds: float = DEBOUNCE_SECONDS,
    ):
        self.api = api
        self.cache = cache or QueryCache()
        self.state = WidgetState.IDLE
        self.term = ""
        self.books: List[BookCandidate] = []
        self.videos: List[VideoCandidate] = []
        self.provider_statuses: List[ProviderStatusSnapshot] = []
        self.error: Optional[Exception] = None
        self._debouncer: Debouncer[str] = Debouncer(self._commit_term, delay=debounce_seconds)

    def on_input(self, text: str) -> None:
        """Record a keystroke. Only the last value of a burst reaches search."""
        self.state = WidgetState.TYPING
        self._debouncer.push(text)

    async def settle(self) -> None:
        """Commit any pending input now and wait for the search it triggers."""
        await self._debouncer.flush()

    async def wait(self) -> None:
        """Wait for the search triggered by the last committed term."""
        await self._debouncer.wait()

    async def _commit_term(self, term: str) -> None:
        self.term = term
        if not term.strip():
            self._clear_results()
            self.state = WidgetState.IDLE
            return

        self.state = WidgetState.QUERYING
        try:
            response = await self.cache.get_or_fetch(
                (SEARCH_QUERY, term), lambda: self.api.search_item(term)
            )
        except _REQUEST_ERRORS as e:
            if term != self.term:
                return
            logger.warning("Search for %r failed: %s", term, e)
            self._clear_results()
            self.error = e
            self.state = WidgetState.RESULTS_SHOWN
            return

        # A newer term was committed while this one was in flight
        if term != self.term:
            return

        self.error = None
        self.books = list(response.books)
        self.videos = list(response.videos)
        self.provider_statuses = list(response.provider_statuses)
        self.state = WidgetState.RESULTS_SHOWN

    async def select_book(self, candidate: BookCandidate) -> IngestionResult:
        return await self._ingest(
            "book", lambda: self.api.create_book(book_payload_from_candidate(candidate))
        )

    async def select_video(self, candidate: VideoCandidate) -> IngestionResult:
        return await self._ingest(
            "video", lambda: self.api.create_video(video_payload_from_candidate(candidate))
        )

    async def retry_link(self, error: IngestionError) -> IngestionResult:
        """Link an item whose create succeeded but whose link failed."""
        if error.phase != "link" or not error.item_id:
            raise ValueError("Only a failed link with a created item can be retried")

        self.state = WidgetState.SELECTING
        try:
            entry = await self._link(error.item_type, error.item_id)
        finally:
            self.state = WidgetState.IDLE
        return IngestionResult(error.item_type, error.item_id, item={"id": error.item_id}, entry=entry)

    async def rewalist(self) -> List[Dict[str, Any]]:
        """The caller's list, served from cache until a link invalidates it."""
        return await self.cache.get_or_fetch((REWALIST_QUERY,), self.api.get_rewalist)

    async def _ingest(
        self, item_type: str, create: Callable[[], Awaitable[Dict[str, Any]]]
    ) -> IngestionResult:
        self._reset_term()
        self.state = WidgetState.SELECTING
        try:
            try:
                item = await create()
            except _CREATE_ERRORS as e:
                logger.warning("Creating %s failed: %s", item_type, e)
                raise IngestionError("create", item_type) from e

            entry = await self._link(item_type, item["id"])
        finally:
            self.state = WidgetState.IDLE

        return IngestionResult(item_type, item["id"], item=item, entry=entry)

    async def _link(self, item_type: str, item_id: str) -> Dict[str, Any]:
        try:
            entry = await self.api.add_to_rewalist(item_id, item_type)
        except _REQUEST_ERRORS as e:
            logger.warning("Linking %s %s failed; item left off the list: %s", item_type, item_id, e)
            raise IngestionError("link", item_type, item_id) from e

        self.cache.invalidate(REWALIST_QUERY)
        return entry

    def _reset_term(self) -> None:
        self._debouncer.cancel()
        self.term = ""
        self._clear_results()

    def _clear_results(self) -> None:
        self.books = []
        self.videos = []
        self.provider_statuses = []
        self.error = None
