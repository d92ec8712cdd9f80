import os
import sys

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel.ext.asyncio.session import AsyncSession

# Add parent directory to path to allow importing models and main
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Tests run against in-memory sqlite; never touch a real database or Sentry
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SENTRY_ENABLE", "false")

from catalog.aggregator import SearchAggregator
from factories import FakeProvider, make_book_candidate, make_video_candidate
from database import init_db
from dependencies import get_search_aggregator
from main import app, get_session

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture(name="book_provider")
def book_provider_fixture():
    return FakeProvider("google_books", [make_book_candidate()])


@pytest.fixture(name="video_provider")
def video_provider_fixture():
    return FakeProvider("imdb", [make_video_candidate()])


@pytest.fixture(name="aggregator")
def aggregator_fixture(book_provider, video_provider):
    return SearchAggregator(book_provider, video_provider, timeout_seconds=1.0)


@pytest_asyncio.fixture(name="session", scope="function")
async def session_fixture():
    # One shared connection so every session sees the same in-memory database
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_db(bind=test_engine)

    async_session = sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with async_session() as session:
        yield session

    await test_engine.dispose()


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession, aggregator: SearchAggregator):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_search_aggregator] = lambda: aggregator

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(name="auth_user_and_token")
async def auth_user_and_token_fixture(session: AsyncSession):
    """Create authenticated user and return (user, token) tuple."""
    from models import User, AuthSession, hash_token, generate_session_token

    user = User(email="reader@example.com")
    session.add(user)
    await session.commit()
    await session.refresh(user)

    token = generate_session_token()
    auth_session = AuthSession(
        email=user.email,
        user_id=user.id,
        session_token_hash=hash_token(token)
    )
    session.add(auth_session)
    await session.commit()

    return user, token


@pytest.fixture(name="auth_headers")
def auth_headers_fixture(auth_user_and_token):
    _, token = auth_user_and_token
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture(name="other_user_headers")
async def other_user_headers_fixture(session: AsyncSession):
    """A second authenticated user (for list ownership tests)."""
    from models import User, AuthSession, hash_token, generate_session_token

    user = User(email="watcher@example.com")
    session.add(user)
    await session.commit()
    await session.refresh(user)

    token = generate_session_token()
    session.add(AuthSession(
        email=user.email,
        user_id=user.id,
        session_token_hash=hash_token(token),
    ))
    await session.commit()
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture(name="author")
async def author_fixture(session: AsyncSession):
    """A stored author that book payloads can reference by id."""
    from models import Author

    author = Author(name="Octavia E. Butler", image="https://img.example/butler.jpg")
    session.add(author)
    await session.commit()
    await session.refresh(author)
    return author
