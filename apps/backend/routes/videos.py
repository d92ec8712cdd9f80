"""Video routes - create catalog videos."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime

from catalog.models import VideoCreate
from dependencies import get_library_service, require_auth
from models import AuthSession
from services.ingestion import LibraryService

router = APIRouter(tags=["videos"])


class VideoRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    description: Optional[str] = None
    image: Optional[str] = None
    cast_members: List[str] = []
    genres: List[str] = []
    release_year: Optional[int] = None
    created_at: datetime


@router.post("/videos", response_model=VideoRead)
async def create_video(
    payload: VideoCreate,
    auth_session: AuthSession = Depends(require_auth),
    service: LibraryService = Depends(get_library_service),
):
    video = await service.create_video(payload)
    return VideoRead.model_validate(video)
