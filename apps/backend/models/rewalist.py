"""Want-list models: a user's ReWa list and its entries."""

from typing import List, Optional
from datetime import datetime
from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel, Relationship

from models.catalog import Book, Video
from models.timestamps import timestamp_field


class ReWaList(SQLModel, table=True):
    __tablename__ = "rewa_list"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", unique=True, index=True)
    created_at: datetime = timestamp_field()

    items: List["ReWaListItem"] = Relationship(
        back_populates="rewa_list",
        sa_relationship_kwargs={"order_by": "ReWaListItem.id"},
    )


class ReWaListItem(SQLModel, table=True):
    """One entry on a list. Exactly one of book_id / video_id is set, matching ``type``."""
    __tablename__ = "rewa_list_item"
    # NULLs never collide, so each constraint only covers its own item type.
    __table_args__ = (
        UniqueConstraint("rewa_list_id", "book_id", name="uq_rewa_list_item_book"),
        UniqueConstraint("rewa_list_id", "video_id", name="uq_rewa_list_item_video"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    rewa_list_id: int = Field(foreign_key="rewa_list.id", index=True)
    type: str  # "book" or "video"
    book_id: Optional[str] = Field(default=None, foreign_key="book.id", index=True)
    video_id: Optional[str] = Field(default=None, foreign_key="video.id", index=True)
    created_at: datetime = timestamp_field()

    rewa_list: Optional[ReWaList] = Relationship(back_populates="items")
    book: Optional[Book] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
    video: Optional[Video] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})

    @property
    def item_id(self) -> Optional[str]:
        return self.book_id if self.type == "book" else self.video_id
