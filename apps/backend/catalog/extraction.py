"""Best-effort field extraction from loosely-typed provider payloads."""

import re
from typing import Iterable, List, Optional

from catalog.models import (
    BookCandidate,
    BookCreate,
    IndustryIdentifier,
    InlineAuthor,
    VideoCandidate,
    VideoCreate,
)

# Any 19xx/20xx token counts, so "1984" in a title is read as a year.
_RELEASE_YEAR_RE = re.compile(r"(19|20)\d{2}")
_PUBLISHED_YEAR_RE = re.compile(r"^\s*(\d{4})")


def extract_release_year(text: Optional[str]) -> Optional[int]:
    """Return the first 19xx/20xx token in ``text`` as an int, or None."""
    if not text:
        return None
    match = _RELEASE_YEAR_RE.search(text)
    if not match:
        return None
    return int(match.group(0))


def published_year(published_date: Optional[str]) -> Optional[int]:
    """Year part of a Google Books ``publishedDate`` ("1994", "1994-05", "1994-05-02")."""
    if not published_date:
        return None
    match = _PUBLISHED_YEAR_RE.match(published_date)
    if not match:
        return None
    return int(match.group(1))


def find_isbn(identifiers: Iterable[IndustryIdentifier], kind: str) -> Optional[int]:
    """
    Numeric value of the first identifier of type ``kind`` (e.g. "ISBN_13").

    ISBNs are stored as numbers, so leading zeros are dropped
    ("0141439513" -> 141439513). Identifiers that are not purely numeric,
    such as an ISBN-10 with an "X" check digit, yield None.
    """
    for ident in identifiers:
        if ident.type != kind:
            continue
        value = (ident.identifier or "").strip()
        if not value.isdigit():
            return None
        return int(value)
    return None


def book_payload_from_candidate(candidate: BookCandidate) -> BookCreate:
    info = candidate.volumeInfo
    authors: List[InlineAuthor] = [InlineAuthor(name=name) for name in info.authors if name]
    return BookCreate(
        title=info.title,
        subtitle=info.subtitle,
        description=info.description,
        cover=info.imageLinks.thumbnail if info.imageLinks else None,
        isbn13=find_isbn(info.industryIdentifiers, "ISBN_13"),
        isbn10=find_isbn(info.industryIdentifiers, "ISBN_10"),
        release_year=published_year(info.publishedDate),
        authors=authors,
    )


def video_payload_from_candidate(candidate: VideoCandidate) -> VideoCreate:
    return VideoCreate(
        title=candidate.title,
        description=candidate.plot,
        image=candidate.image,
        cast_members=[star.name for star in candidate.starList or []],
        genres=[genre.value for genre in candidate.genreList or []],
        release_year=extract_release_year(candidate.description),
    )
