"""Data-access interface for catalog items and want lists."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Sequence, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from exceptions import ConstraintViolationError, DatabaseError
from models import Author, Book, BookAuthorLink, ReWaList, ReWaListItem, Video

logger = logging.getLogger(__name__)

CatalogItem = Union[Book, Video]


class LibraryStore(ABC):
    """
    Everything the ingestion operations need from persistence.

    Handlers receive an implementation explicitly instead of reaching for a
    global session, which keeps the operations testable against fakes.
    """

    @abstractmethod
    async def get_authors(self, author_ids: Iterable[str]) -> Dict[str, Author]:
        """Existing authors keyed by id. Unknown ids are simply absent."""

    @abstractmethod
    async def create_book(self, book: Book, authors: Sequence[Author]) -> Book:
        """Persist ``book`` with ``authors`` linked in order, in one transaction."""

    @abstractmethod
    async def create_video(self, video: Video) -> Video:
        pass

    @abstractmethod
    async def get_catalog_item(self, item_type: str, item_id: str) -> Optional[CatalogItem]:
        pass

    @abstractmethod
    async def get_or_create_list(self, user_id: int) -> ReWaList:
        pass

    @abstractmethod
    async def find_list_item(self, list_id: int, item_type: str, item_id: str) -> Optional[ReWaListItem]:
        pass

    @abstractmethod
    async def add_list_item(self, item: ReWaListItem) -> ReWaListItem:
        pass

    @abstractmethod
    async def list_items(self, list_id: int) -> List[ReWaListItem]:
        pass


class SqlLibraryStore(LibraryStore):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_authors(self, author_ids: Iterable[str]) -> Dict[str, Author]:
        ids = list(dict.fromkeys(author_ids))
        if not ids:
            return {}
        result = await self.session.exec(select(Author).where(Author.id.in_(ids)))
        return {author.id: author for author in result.all()}

    async def create_book(self, book: Book, authors: Sequence[Author]) -> Book:
        # New authors ride along through the link relationship, so the book,
        # the author rows and the links are flushed in a single commit.
        book.author_links = [
            BookAuthorLink(author=author, position=position)
            for position, author in enumerate(authors)
        ]
        self.session.add(book)
        await self._commit("create book")
        return book

    async def create_video(self, video: Video) -> Video:
        self.session.add(video)
        await self._commit("create video")
        return video

    async def get_catalog_item(self, item_type: str, item_id: str) -> Optional[CatalogItem]:
        model = Book if item_type == "book" else Video
        return await self.session.get(model, item_id)

    async def get_or_create_list(self, user_id: int) -> ReWaList:
        result = await self.session.exec(select(ReWaList).where(ReWaList.user_id == user_id))
        rewa_list = result.first()
        if rewa_list:
            return rewa_list

        rewa_list = ReWaList(user_id=user_id)
        self.session.add(rewa_list)
        try:
            await self.session.commit()
        except IntegrityError:
            # Another request created it first
            await self.session.rollback()
            result = await self.session.exec(select(ReWaList).where(ReWaList.user_id == user_id))
            return result.one()
        await self.session.refresh(rewa_list)
        return rewa_list

    async def find_list_item(self, list_id: int, item_type: str, item_id: str) -> Optional[ReWaListItem]:
        column = ReWaListItem.book_id if item_type == "book" else ReWaListItem.video_id
        result = await self.session.exec(
            select(ReWaListItem).where(
                ReWaListItem.rewa_list_id == list_id,
                ReWaListItem.type == item_type,
                column == item_id,
            )
        )
        return result.first()

    async def add_list_item(self, item: ReWaListItem) -> ReWaListItem:
        list_id, item_type, item_id = item.rewa_list_id, item.type, item.item_id
        self.session.add(item)
        try:
            await self.session.commit()
        except IntegrityError as e:
            # A concurrent add of the same pair won the unique constraint
            await self.session.rollback()
            existing = await self.find_list_item(list_id, item_type, item_id)
            if existing is None:
                logger.warning("Constraint violation during add list item: %s", e.orig)
                raise ConstraintViolationError(
                    "Failed to add list item: constraint violation",
                    detail={"action": "add list item"},
                ) from e
            logger.info("List item already added", extra={"list_id": list_id, "item_id": item_id})
            item = existing
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Database error during add list item", exc_info=True)
            raise DatabaseError("Failed to add list item", detail={"action": "add list item"}) from e
        result = await self.session.exec(
            self._list_item_query().where(ReWaListItem.id == item.id)
        )
        return result.one()

    async def list_items(self, list_id: int) -> List[ReWaListItem]:
        result = await self.session.exec(
            self._list_item_query()
            .where(ReWaListItem.rewa_list_id == list_id)
            .order_by(ReWaListItem.id)
        )
        return list(result.all())

    def _list_item_query(self):
        # Eager-load the referenced item; lazy loads are not allowed under asyncio
        return select(ReWaListItem).options(
            selectinload(ReWaListItem.book)
            .selectinload(Book.author_links)
            .selectinload(BookAuthorLink.author),
            selectinload(ReWaListItem.video),
        ).execution_options(populate_existing=True)

    async def _commit(self, action: str) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning("Constraint violation during %s: %s", action, e.orig)
            raise ConstraintViolationError(
                f"Failed to {action}: constraint violation",
                detail={"action": action},
            ) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Database error during %s", action, exc_info=True)
            raise DatabaseError(f"Failed to {action}", detail={"action": action}) from e
