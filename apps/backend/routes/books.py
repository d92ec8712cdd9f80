"""Book routes - create catalog books."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime

from catalog.models import BookCreate
from dependencies import get_library_service, require_auth
from models import AuthSession, Book
from services.ingestion import LibraryService

router = APIRouter(tags=["books"])


class AuthorRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    image: Optional[str] = None


class BookRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    subtitle: Optional[str] = None
    description: Optional[str] = None
    cover: Optional[str] = None
    isbn13: Optional[int] = None
    isbn10: Optional[int] = None
    release_year: Optional[int] = None
    created_at: datetime
    authors: List[AuthorRead] = []

    @classmethod
    def from_book(cls, book: Book) -> "BookRead":
        return cls.model_validate(book)


@router.post("/books", response_model=BookRead)
async def create_book(
    payload: BookCreate,
    auth_session: AuthSession = Depends(require_auth),
    service: LibraryService = Depends(get_library_service),
):
    book = await service.create_book(payload)
    return BookRead.from_book(book)
