"""Typed models for catalog search and ingestion.

Candidate models mirror the provider payloads (camelCase keys, most fields
optional). Create payloads use snake_case attributes with camelCase aliases,
matching what the web client sends.
"""

from __future__ import annotations

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

ProviderStatus = Literal["ok", "error", "timeout", "disabled"]
ItemType = Literal["book", "video"]


# ---------------------------------------------------------------------------
# Provider candidates
# ---------------------------------------------------------------------------


class IndustryIdentifier(BaseModel):
    type: str
    identifier: str


class ImageLinks(BaseModel):
    thumbnail: Optional[str] = None
    smallThumbnail: Optional[str] = None


class VolumeInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str = ""
    subtitle: Optional[str] = None
    authors: List[str] = Field(default_factory=list)
    industryIdentifiers: List[IndustryIdentifier] = Field(default_factory=list)
    imageLinks: Optional[ImageLinks] = None
    publishedDate: Optional[str] = None
    description: Optional[str] = None


class BookCandidate(BaseModel):
    """One Google Books volume."""

    model_config = ConfigDict(extra="allow")

    id: str
    volumeInfo: VolumeInfo = Field(default_factory=VolumeInfo)


class StarRef(BaseModel):
    id: Optional[str] = None
    name: str


class GenreRef(BaseModel):
    key: Optional[str] = None
    value: str


class VideoCandidate(BaseModel):
    """One IMDb advanced-search result."""

    model_config = ConfigDict(extra="allow")

    id: str
    title: str = ""
    description: str = ""
    plot: Optional[str] = None
    image: Optional[str] = None
    stars: Optional[str] = None
    genres: Optional[str] = None
    starList: Optional[List[StarRef]] = None
    genreList: Optional[List[GenreRef]] = None

    @field_validator("description", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> str:
        return value or ""


class ProviderStatusSnapshot(BaseModel):
    provider_id: str
    status: ProviderStatus
    result_count: int = 0
    latency_ms: Optional[int] = None
    message: Optional[str] = None


class AggregatedSearchResponse(BaseModel):
    books: List[BookCandidate] = Field(default_factory=list)
    videos: List[VideoCandidate] = Field(default_factory=list)
    provider_statuses: List[ProviderStatusSnapshot] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Ingestion payloads
# ---------------------------------------------------------------------------


class AuthorReference(BaseModel):
    """An existing author, referenced by id."""

    kind: Literal["reference"] = "reference"
    id: str


class InlineAuthor(BaseModel):
    """A new author to create alongside the book."""

    kind: Literal["inline"] = "inline"
    name: str
    image: Optional[str] = None


AuthorInput = Annotated[Union[AuthorReference, InlineAuthor], Field(discriminator="kind")]


class BookCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = Field(..., min_length=1)
    subtitle: Optional[str] = None
    description: Optional[str] = None
    cover: Optional[str] = None
    isbn13: Optional[int] = None
    isbn10: Optional[int] = None
    release_year: Optional[int] = None
    authors: List[AuthorInput] = Field(default_factory=list)

    @field_validator("authors", mode="before")
    @classmethod
    def _tag_authors(cls, value: Any) -> Any:
        """Turn the wire union (id string | {name, image?}) into tagged variants."""
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        tagged = []
        for author in value:
            if isinstance(author, str):
                tagged.append({"kind": "reference", "id": author})
            elif isinstance(author, dict) and "kind" not in author and "name" in author:
                tagged.append({"kind": "inline", **author})
            else:
                tagged.append(author)
        return tagged

    @field_serializer("authors")
    def _untag_authors(self, authors: List[Union[AuthorReference, InlineAuthor]]) -> List[Any]:
        wire: List[Any] = []
        for author in authors:
            if isinstance(author, AuthorReference):
                wire.append(author.id)
            else:
                entry = {"name": author.name}
                if author.image is not None:
                    entry["image"] = author.image
                wire.append(entry)
        return wire


class VideoCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    image: Optional[str] = None
    cast_members: List[str] = Field(default_factory=list)
    genres: List[str] = Field(default_factory=list)
    release_year: Optional[int] = None

    @field_validator("cast_members", "genres", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value


class ReWaListAdd(BaseModel):
    id: str
    type: ItemType
