"""
Model exports.

Models are organized into domain modules:
- auth.py: users and bearer sessions
- catalog.py: books, authors, and videos
- rewalist.py: a user's want list and its entries
- timestamps.py: timezone-aware UTC timestamp columns
"""

from models.auth import (
    User,
    AuthSession,
    hash_token,
    generate_session_token,
)

from models.catalog import (
    Author,
    AuthorBase,
    Book,
    BookBase,
    BookAuthorLink,
    Video,
    VideoBase,
    generate_catalog_id,
)

from models.rewalist import (
    ReWaList,
    ReWaListItem,
)

__all__ = [
    "User",
    "AuthSession",
    "hash_token",
    "generate_session_token",
    "Author",
    "AuthorBase",
    "Book",
    "BookBase",
    "BookAuthorLink",
    "Video",
    "VideoBase",
    "generate_catalog_id",
    "ReWaList",
    "ReWaListItem",
]
