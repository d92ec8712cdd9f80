"""
Centralized FastAPI dependencies.

Route handlers get their collaborators from here: the authenticated session,
the data-access store, the library service and the search aggregator. Tests
swap any of them through ``app.dependency_overrides``.
"""

from typing import Optional
from fastapi import Header, Depends
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select

from catalog.aggregator import SearchAggregator
from database import get_session
from exceptions import AuthenticationError
from models import AuthSession, hash_token
from observability.logging import bind_user
from services.ingestion import LibraryService
from services.library_store import LibraryStore, SqlLibraryStore

_search_aggregator: Optional[SearchAggregator] = None


async def get_current_session(
    authorization: Optional[str] = Header(None),
    session: AsyncSession = Depends(get_session)
) -> Optional[AuthSession]:
    """
    Resolve the bearer token in the Authorization header to a live session.
    Returns None if the header is missing or the token is unknown, revoked
    or expired.
    """
    if not authorization or not authorization.startswith("Bearer "):
        return None

    token = authorization[len("Bearer "):]
    result = await session.exec(
        select(AuthSession).where(AuthSession.session_token_hash == hash_token(token))
    )
    auth_session = result.first()
    if auth_session is None or not auth_session.is_active():
        return None
    return auth_session


async def require_auth(
    authorization: Optional[str] = Header(None),
    session: AsyncSession = Depends(get_session)
) -> AuthSession:
    """Dependency that requires authentication (401 otherwise)."""
    auth_session = await get_current_session(authorization, session)
    if not auth_session or auth_session.user_id is None:
        raise AuthenticationError("Not authenticated")
    bind_user(auth_session.user_id)
    return auth_session


def get_library_store(session: AsyncSession = Depends(get_session)) -> LibraryStore:
    return SqlLibraryStore(session)


def get_library_service(store: LibraryStore = Depends(get_library_store)) -> LibraryService:
    return LibraryService(store)


def get_search_aggregator() -> SearchAggregator:
    global _search_aggregator
    if _search_aggregator is None:
        _search_aggregator = SearchAggregator.from_env()
    return _search_aggregator
