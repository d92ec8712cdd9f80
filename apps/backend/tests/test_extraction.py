import pytest

from catalog.extraction import (
    book_payload_from_candidate,
    extract_release_year,
    find_isbn,
    published_year,
    video_payload_from_candidate,
)
from catalog.models import IndustryIdentifier, InlineAuthor
from factories import make_book_candidate, make_video_candidate


@pytest.mark.parametrize(
    "text,expected",
    [
        ("(1999)", 1999),
        ("(2010 TV Movie)", 2010),
        ("(2008–2013)", 2008),
        ("Released in 1875 and again in 2003", 2003),
        ("(I) (1984)", 1984),
        ("No year here", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_release_year(text, expected):
    assert extract_release_year(text) == expected


def test_extract_release_year_matches_inside_longer_numbers():
    # Any 19xx/20xx run counts, even without word boundaries
    assert extract_release_year("Episode 120045") == 2004


@pytest.mark.parametrize(
    "published,expected",
    [("1969", 1969), ("1969-03", 1969), ("2004-11-02", 2004), ("circa 1900", None), (None, None)],
)
def test_published_year(published, expected):
    assert published_year(published) == expected


def test_find_isbn_drops_leading_zeros():
    identifiers = [IndustryIdentifier(type="ISBN_10", identifier="0141439513")]
    assert find_isbn(identifiers, "ISBN_10") == 141439513


def test_find_isbn_rejects_check_digit_x():
    identifiers = [IndustryIdentifier(type="ISBN_10", identifier="080442957X")]
    assert find_isbn(identifiers, "ISBN_10") is None


def test_find_isbn_missing_type():
    identifiers = [IndustryIdentifier(type="OTHER", identifier="UOM:39015")]
    assert find_isbn(identifiers, "ISBN_13") is None


def test_book_payload_from_candidate():
    payload = book_payload_from_candidate(make_book_candidate())

    assert payload.title == "The Left Hand of Darkness"
    assert payload.cover == "https://books.example/cover.jpg"
    assert payload.isbn13 == 9780441478125
    assert payload.isbn10 == 441478123
    assert payload.release_year == 1969
    assert payload.authors == [InlineAuthor(name="Ursula K. Le Guin")]


def test_book_payload_tolerates_sparse_volume():
    candidate = make_book_candidate(
        authors=[], industryIdentifiers=[], imageLinks=None, publishedDate=None
    )
    payload = book_payload_from_candidate(candidate)

    assert payload.cover is None
    assert payload.isbn13 is None
    assert payload.isbn10 is None
    assert payload.release_year is None
    assert payload.authors == []


def test_video_payload_from_candidate():
    payload = video_payload_from_candidate(make_video_candidate())

    assert payload.title == "Dune"
    assert payload.description.startswith("A Duke's son")
    assert payload.image == "https://video.example/dune.jpg"
    assert payload.cast_members == ["Kyle MacLachlan"]
    assert payload.genres == ["Action", "Sci-Fi"]
    assert payload.release_year == 1984


def test_video_payload_without_lists_or_year():
    candidate = make_video_candidate(description=None, starList=None, genreList=None, plot=None)
    payload = video_payload_from_candidate(candidate)

    assert payload.cast_members == []
    assert payload.genres == []
    assert payload.release_year is None
    assert payload.description is None


def test_first_year_wins():
    assert extract_release_year("Released in 1994, remastered in 2010") == 1994


def test_isbn_pair_from_google_identifiers():
    identifiers = [
        IndustryIdentifier(type="ISBN_13", identifier="9780141439518"),
        IndustryIdentifier(type="ISBN_10", identifier="0141439513"),
    ]

    assert find_isbn(identifiers, "ISBN_13") == 9780141439518
    assert find_isbn(identifiers, "ISBN_10") == 141439513
