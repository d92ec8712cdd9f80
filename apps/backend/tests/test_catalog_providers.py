"""Catalog provider response parsing, with the outbound HTTP call stubbed."""

import pytest

from catalog.providers import GoogleBooksProvider, ImdbProvider
from exceptions import SearchProviderError


def _stub_response(provider, data):
    async def fake_get_json(url, params=None, timeout=10.0):
        provider.requested = (url, params)
        return data

    provider._get_json = fake_get_json
    return provider


@pytest.mark.asyncio
async def test_google_books_skips_untitled_and_malformed_volumes():
    provider = _stub_response(GoogleBooksProvider(api_key="key"), {
        "items": [
            {"id": "vol-1", "volumeInfo": {"title": "Kindred"}},
            {"id": "vol-2", "volumeInfo": {"title": ""}},
            {"id": "vol-3", "volumeInfo": {"authors": ["Anonymous"]}},
            {"volumeInfo": {"title": "No id"}},
        ]
    })

    results = await provider.search("kindred")

    assert [c.id for c in results] == ["vol-1"]
    assert provider.requested[1] == {"q": "kindred", "maxResults": 10, "key": "key"}


@pytest.mark.asyncio
async def test_google_books_without_items_returns_empty():
    provider = _stub_response(GoogleBooksProvider(), {"totalItems": 0})

    assert await provider.search("zzzz") == []


@pytest.mark.asyncio
async def test_imdb_skips_untitled_results():
    provider = _stub_response(ImdbProvider(api_key="key"), {
        "results": [
            {"id": "tt0113277", "title": "Heat", "description": "(1995)"},
            {"id": "tt0000001", "title": "   ", "description": "(1994)"},
        ],
        "errorMessage": "",
    })

    results = await provider.search("heat")

    assert [c.title for c in results] == ["Heat"]


@pytest.mark.asyncio
async def test_imdb_in_band_error_raises():
    provider = _stub_response(ImdbProvider(api_key="key"), {"results": None, "errorMessage": "Invalid API Key"})

    with pytest.raises(SearchProviderError) as exc_info:
        await provider.search("heat")

    assert exc_info.value.detail["provider"] == "imdb"
