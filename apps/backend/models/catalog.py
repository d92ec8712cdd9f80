"""Catalog models: books, their authors, and videos."""

from typing import List, Optional
from datetime import datetime
import uuid
import sqlalchemy as sa
from sqlmodel import Field, SQLModel, Relationship, Column

from models.timestamps import timestamp_field


def generate_catalog_id() -> str:
    return uuid.uuid4().hex


class AuthorBase(SQLModel):
    name: str
    image: Optional[str] = None


class Author(AuthorBase, table=True):
    # Names are not unique: inline payloads always create a new row.
    id: str = Field(default_factory=generate_catalog_id, primary_key=True)
    created_at: datetime = timestamp_field()


class BookAuthorLink(SQLModel, table=True):
    """Ordered association between a book and its authors."""
    __tablename__ = "book_author_link"

    book_id: str = Field(foreign_key="book.id", primary_key=True)
    author_id: str = Field(foreign_key="author.id", primary_key=True)
    position: int = 0

    book: "Book" = Relationship(back_populates="author_links")
    author: Author = Relationship(sa_relationship_kwargs={"lazy": "selectin"})


class BookBase(SQLModel):
    title: str
    subtitle: Optional[str] = None
    description: Optional[str] = None
    cover: Optional[str] = None
    isbn13: Optional[int] = None
    isbn10: Optional[int] = None
    release_year: Optional[int] = None


class Book(BookBase, table=True):
    id: str = Field(default_factory=generate_catalog_id, primary_key=True)
    created_at: datetime = timestamp_field()

    # 13-digit ISBNs overflow a 32-bit integer column
    isbn13: Optional[int] = Field(default=None, sa_column=Column(sa.BigInteger, nullable=True))
    isbn10: Optional[int] = Field(default=None, sa_column=Column(sa.BigInteger, nullable=True))

    author_links: List[BookAuthorLink] = Relationship(
        back_populates="book",
        sa_relationship_kwargs={"lazy": "selectin", "order_by": "BookAuthorLink.position"},
    )

    @property
    def authors(self) -> List[Author]:
        return [link.author for link in self.author_links]


class VideoBase(SQLModel):
    title: str
    description: Optional[str] = None
    image: Optional[str] = None
    release_year: Optional[int] = None


class Video(VideoBase, table=True):
    id: str = Field(default_factory=generate_catalog_id, primary_key=True)
    created_at: datetime = timestamp_field()

    # Flat name lists, not relational references
    cast_members: List[str] = Field(default_factory=list, sa_column=Column(sa.JSON, nullable=False))
    genres: List[str] = Field(default_factory=list, sa_column=Column(sa.JSON, nullable=False))
