"""Catalog ingestion: create books and videos, and manage the ReWa list."""

import enum
import logging
import os
from typing import List, Optional, Union

from catalog.models import AuthorReference, BookCreate, InlineAuthor, VideoCreate
from exceptions import ConstraintViolationError, ResourceNotFoundError, ValidationError
from models import Author, Book, ReWaListItem, Video
from observability.metrics import business_events_total, unresolved_authors_total
from services.library_store import LibraryStore

logger = logging.getLogger(__name__)

ITEM_TYPES = ("book", "video")


class UnresolvedAuthorPolicy(str, enum.Enum):
    """What to do with an author id that matches no stored author."""

    DROP = "drop"
    REJECT = "reject"

    @classmethod
    def from_env(cls) -> "UnresolvedAuthorPolicy":
        raw = (os.getenv("UNRESOLVED_AUTHOR_POLICY") or cls.DROP.value).strip().lower()
        try:
            return cls(raw)
        except ValueError:
            logger.warning("Unknown UNRESOLVED_AUTHOR_POLICY %r, using 'drop'", raw)
            return cls.DROP


class LibraryService:
    def __init__(
        self,
        store: LibraryStore,
        *,
        author_policy: Optional[UnresolvedAuthorPolicy] = None,
    ):
        self.store = store
        self.author_policy = author_policy or UnresolvedAuthorPolicy.from_env()

    async def resolve_authors(
        self, authors: List[Union[AuthorReference, InlineAuthor]]
    ) -> List[Author]:
        """
        Map author inputs to Author rows, preserving input order.

        References resolve to stored authors (one batched read); inline
        payloads become new, unsaved Author rows. A reference that resolves
        to nothing is dropped or rejected depending on ``author_policy``.
        Repeated references to the same author are linked once.
        """
        reference_ids = [a.id for a in authors if isinstance(a, AuthorReference)]
        existing = await self.store.get_authors(reference_ids)

        missing = [author_id for author_id in reference_ids if author_id not in existing]
        if missing:
            unresolved_authors_total.labels(policy=self.author_policy.value).inc(len(missing))
            if self.author_policy is UnresolvedAuthorPolicy.REJECT:
                raise ResourceNotFoundError(
                    "Author not found", detail={"author_ids": missing}
                )
            logger.info("Dropping %d unresolved author reference(s): %s", len(missing), missing)

        resolved: List[Author] = []
        linked_ids = set()
        for author in authors:
            if isinstance(author, AuthorReference):
                stored = existing.get(author.id)
                if stored is None or stored.id in linked_ids:
                    continue
                linked_ids.add(stored.id)
                resolved.append(stored)
            else:
                resolved.append(Author(name=author.name, image=author.image))
        return resolved

    async def create_book(self, payload: BookCreate) -> Book:
        if not payload.title or not payload.title.strip():
            raise ValidationError("Title is required", detail={"field": "title"})

        authors = await self.resolve_authors(payload.authors)
        book = Book(
            title=payload.title,
            subtitle=payload.subtitle,
            description=payload.description,
            cover=payload.cover,
            isbn13=payload.isbn13,
            isbn10=payload.isbn10,
            release_year=payload.release_year,
        )
        book = await self.store.create_book(book, authors)

        business_events_total.labels(event_type="book_created").inc()
        logger.info(
            "Book created",
            extra={"book_id": book.id, "author_count": len(authors)},
        )
        return book

    async def create_video(self, payload: VideoCreate) -> Video:
        if not payload.title or not payload.title.strip():
            raise ValidationError("Title is required", detail={"field": "title"})

        video = Video(
            title=payload.title,
            description=payload.description,
            image=payload.image,
            cast_members=list(payload.cast_members),
            genres=list(payload.genres),
            release_year=payload.release_year,
        )
        video = await self.store.create_video(video)

        business_events_total.labels(event_type="video_created").inc()
        logger.info("Video created", extra={"video_id": video.id})
        return video

    async def add_to_rewalist(self, user_id: int, item_id: str, item_type: str) -> ReWaListItem:
        """
        Put a catalog item on the user's list.

        The item must already exist. Adding the same item twice returns the
        existing entry instead of creating a duplicate.
        """
        if item_type not in ITEM_TYPES:
            raise ValidationError("Unknown item type", detail={"type": item_type})

        item = await self.store.get_catalog_item(item_type, item_id)
        if item is None:
            raise ConstraintViolationError(
                "Catalog item does not exist",
                detail={"id": item_id, "type": item_type},
            )

        rewa_list = await self.store.get_or_create_list(user_id)
        # A lost insert race rolls the session back, expiring rewa_list
        list_id = rewa_list.id
        existing = await self.store.find_list_item(list_id, item_type, item_id)
        if existing is not None:
            logger.info(
                "Item already on list",
                extra={"list_id": list_id, "item_id": item_id, "item_type": item_type},
            )
            return existing

        entry = ReWaListItem(
            rewa_list_id=list_id,
            type=item_type,
            book_id=item_id if item_type == "book" else None,
            video_id=item_id if item_type == "video" else None,
        )
        entry = await self.store.add_list_item(entry)

        business_events_total.labels(event_type="rewalist_item_added").inc()
        logger.info(
            "Item added to list",
            extra={"list_id": list_id, "item_id": item_id, "item_type": item_type},
        )
        return entry

    async def get_rewalist(self, user_id: int) -> List[ReWaListItem]:
        rewa_list = await self.store.get_or_create_list(user_id)
        return await self.store.list_items(rewa_list.id)
