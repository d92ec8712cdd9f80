import pytest

from exceptions import SearchProviderError


@pytest.mark.asyncio
async def test_search_returns_books_and_videos(client):
    resp = await client.get("/search", params={"term": "dune"})

    assert resp.status_code == 200
    data = resp.json()
    assert data["books"][0]["volumeInfo"]["title"] == "The Left Hand of Darkness"
    assert data["videos"][0]["title"] == "Dune"
    assert data["videos"][0]["starList"][0]["name"] == "Kyle MacLachlan"
    assert {s["status"] for s in data["provider_statuses"]} == {"ok"}


@pytest.mark.asyncio
async def test_search_is_public(client):
    # No Authorization header
    resp = await client.get("/search", params={"term": "dune"})
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_empty_term_returns_empty_results(client, book_provider, video_provider):
    resp = await client.get("/search", params={"term": ""})

    assert resp.status_code == 200
    assert resp.json() == {"books": [], "videos": [], "provider_statuses": []}
    assert book_provider.calls == []
    assert video_provider.calls == []


@pytest.mark.asyncio
async def test_missing_term_behaves_like_empty(client, book_provider):
    resp = await client.get("/search")

    assert resp.status_code == 200
    assert resp.json()["books"] == []
    assert book_provider.calls == []


@pytest.mark.asyncio
async def test_video_failure_still_returns_books(client, video_provider):
    video_provider.error = SearchProviderError("Invalid API Key", provider="imdb")

    resp = await client.get("/search", params={"term": "dune"})

    assert resp.status_code == 200
    data = resp.json()
    assert len(data["books"]) == 1
    assert data["videos"] == []
    imdb = next(s for s in data["provider_statuses"] if s["provider_id"] == "imdb")
    assert imdb["status"] == "error"
