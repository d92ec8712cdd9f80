"""ReWa list routes - add catalog items to the caller's list and read it back."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime

from catalog.models import ReWaListAdd
from dependencies import get_library_service, require_auth
from models import AuthSession, ReWaListItem
from routes.books import BookRead
from routes.videos import VideoRead
from services.ingestion import LibraryService

router = APIRouter(tags=["rewalist"])


class ReWaListEntryRead(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    type: str
    item_id: str
    created_at: datetime
    book: Optional[BookRead] = None
    video: Optional[VideoRead] = None

    @classmethod
    def from_item(cls, item: ReWaListItem) -> "ReWaListEntryRead":
        return cls(
            id=item.id,
            type=item.type,
            item_id=item.item_id,
            created_at=item.created_at,
            book=BookRead.from_book(item.book) if item.book else None,
            video=VideoRead.model_validate(item.video) if item.video else None,
        )


@router.post("/rewalist/items", response_model=ReWaListEntryRead)
async def add_to_rewalist(
    payload: ReWaListAdd,
    auth_session: AuthSession = Depends(require_auth),
    service: LibraryService = Depends(get_library_service),
):
    item = await service.add_to_rewalist(auth_session.user_id, payload.id, payload.type)
    return ReWaListEntryRead.from_item(item)


@router.get("/rewalist", response_model=List[ReWaListEntryRead])
async def get_rewalist(
    auth_session: AuthSession = Depends(require_auth),
    service: LibraryService = Depends(get_library_service),
):
    items = await service.get_rewalist(auth_session.user_id)
    return [ReWaListEntryRead.from_item(item) for item in items]
