"""Author resolution when creating books: references, inline authors and ordering."""

import pytest
from sqlmodel import select

from catalog.models import AuthorReference, BookCreate, InlineAuthor
from exceptions import ResourceNotFoundError, ValidationError
from models import Author, Book, BookAuthorLink
from services.ingestion import LibraryService, UnresolvedAuthorPolicy
from services.library_store import SqlLibraryStore


@pytest.fixture(name="service")
def service_fixture(session):
    return LibraryService(SqlLibraryStore(session), author_policy=UnresolvedAuthorPolicy.DROP)


@pytest.mark.asyncio
async def test_mixed_authors_keep_input_order(service, session, author):
    payload = BookCreate(
        title="Parable of the Sower",
        authors=[InlineAuthor(name="First Inline"), AuthorReference(id=author.id), InlineAuthor(name="Last Inline")],
    )

    book = await service.create_book(payload)

    assert [a.name for a in book.authors] == ["First Inline", "Octavia E. Butler", "Last Inline"]
    assert book.authors[1].id == author.id

    links = (await session.exec(
        select(BookAuthorLink).where(BookAuthorLink.book_id == book.id).order_by(BookAuthorLink.position)
    )).all()
    assert [link.position for link in links] == [0, 1, 2]


@pytest.mark.asyncio
async def test_reference_reuses_existing_author(service, session, author):
    await service.create_book(BookCreate(title="Kindred", authors=[AuthorReference(id=author.id)]))
    await service.create_book(BookCreate(title="Dawn", authors=[AuthorReference(id=author.id)]))

    authors = (await session.exec(select(Author))).all()
    assert [a.id for a in authors] == [author.id]


@pytest.mark.asyncio
async def test_inline_author_always_creates_new_row(service, session, author):
    await service.create_book(BookCreate(title="Kindred", authors=[InlineAuthor(name="Octavia E. Butler")]))

    authors = (await session.exec(select(Author).where(Author.name == "Octavia E. Butler"))).all()
    assert len(authors) == 2


@pytest.mark.asyncio
async def test_unresolved_reference_is_dropped(service, author):
    book = await service.create_book(BookCreate(
        title="Wild Seed",
        authors=[AuthorReference(id="missing-author"), AuthorReference(id=author.id)],
    ))

    assert [a.id for a in book.authors] == [author.id]


@pytest.mark.asyncio
async def test_unresolved_reference_rejected_under_reject_policy(session, author):
    service = LibraryService(SqlLibraryStore(session), author_policy=UnresolvedAuthorPolicy.REJECT)

    with pytest.raises(ResourceNotFoundError) as exc_info:
        await service.create_book(BookCreate(
            title="Wild Seed",
            authors=[AuthorReference(id="missing-author")],
        ))

    assert exc_info.value.detail == {"author_ids": ["missing-author"]}
    books = (await session.exec(select(Book))).all()
    assert books == []


@pytest.mark.asyncio
async def test_repeated_reference_is_linked_once(service, author):
    book = await service.create_book(BookCreate(
        title="Fledgling",
        authors=[AuthorReference(id=author.id), AuthorReference(id=author.id)],
    ))

    assert [a.id for a in book.authors] == [author.id]


@pytest.mark.asyncio
async def test_book_without_authors(service):
    book = await service.create_book(BookCreate(title="Anonymous Tales"))

    assert book.authors == []
    assert book.id


@pytest.mark.asyncio
async def test_blank_title_rejected(service):
    with pytest.raises(ValidationError):
        await service.create_book(BookCreate(title="   "))


class CountingStore(SqlLibraryStore):
    def __init__(self, session):
        super().__init__(session)
        self.author_lookups = []

    async def get_authors(self, author_ids):
        ids = list(author_ids)
        self.author_lookups.append(ids)
        return await super().get_authors(ids)


@pytest.mark.asyncio
async def test_references_resolved_in_one_lookup(session, author):
    store = CountingStore(session)
    service = LibraryService(store, author_policy=UnresolvedAuthorPolicy.DROP)

    await service.create_book(BookCreate(
        title="Lilith's Brood",
        authors=[AuthorReference(id=author.id), InlineAuthor(name="Editor"), AuthorReference(id="gone")],
    ))

    assert store.author_lookups == [[author.id, "gone"]]


def test_policy_from_env(monkeypatch):
    monkeypatch.setenv("UNRESOLVED_AUTHOR_POLICY", "REJECT")
    assert UnresolvedAuthorPolicy.from_env() is UnresolvedAuthorPolicy.REJECT

    monkeypatch.setenv("UNRESOLVED_AUTHOR_POLICY", "sometimes")
    assert UnresolvedAuthorPolicy.from_env() is UnresolvedAuthorPolicy.DROP

    monkeypatch.delenv("UNRESOLVED_AUTHOR_POLICY")
    assert UnresolvedAuthorPolicy.from_env() is UnresolvedAuthorPolicy.DROP


@pytest.mark.asyncio
async def test_reference_then_inline_from_wire_payload(service, author):
    payload = BookCreate.model_validate({
        "title": "Pride and Prejudice",
        "authors": [author.id, {"name": "New Author"}],
    })

    book = await service.create_book(payload)

    assert [a.name for a in book.authors] == ["Octavia E. Butler", "New Author"]
    assert book.authors[0].id == author.id
    assert book.authors[1].id != author.id
