"""Unit tests for catalog listing and candidate selection."""

import threading
from collections.abc import Generator
from unittest.mock import MagicMock

import pytest

from src.config.constants import DEFAULT_BLOCKED_TERMS, DEFAULT_CATALOG_URL
from src.config.schemas import RemoteConfig
from src.fetch.client import HttpFetcher
from src.fetch.models import FetchErrorClass
from src.remote.catalog import CatalogClient, is_blocked, select_candidates
from src.remote.errors import (
    CatalogUnavailableError,
    FetchCancelledError,
    RemoteErrorClass,
)
from src.remote.metrics import RemoteMetrics
from src.remote.models import RemoteBook
from tests.helpers.fixtures import (
    book_payload,
    catalog_payload,
    failed_result,
    ok_result,
)


PAGE_2_URL = f"{DEFAULT_CATALOG_URL}?page=2"


@pytest.fixture(autouse=True)
def reset_metrics() -> Generator[None, None, None]:
    """Reset the remote metrics singleton around each test."""
    RemoteMetrics.reset()
    yield
    RemoteMetrics.reset()


@pytest.fixture
def fetcher() -> MagicMock:
    """Mock HTTP fetcher."""
    return MagicMock(spec=HttpFetcher)


def book(book_id: int, **kwargs: object) -> RemoteBook:
    """Parsed catalog entry."""
    return RemoteBook.model_validate(book_payload(book_id, **kwargs))  # type: ignore[arg-type]


class TestRemoteBook:
    """Tests for RemoteBook helpers."""

    def test_prefers_utf8_plain_text(self) -> None:
        """Test the plain-text format preference order."""
        entry = book(
            1,
            formats={
                "text/plain": "https://example.org/1.txt",
                "text/plain; charset=utf-8": "https://example.org/1-0.txt",
            },
        )

        assert entry.plain_text_url == "https://example.org/1-0.txt"

    def test_zip_never_returned(self) -> None:
        """Test that zipped text is not a usable format."""
        entry = book(1, formats={"text/plain; charset=us-ascii": "https://x/1.zip"})

        assert entry.plain_text_url is None

    def test_author_names(self) -> None:
        """Test attribution formatting."""
        assert book(1).author_names == "Author, Test"


class TestSelectCandidates:
    """Tests for select_candidates."""

    def test_orders_by_downloads_then_id(self) -> None:
        """Test ordering by popularity with id tie-break."""
        books = [
            book(3, download_count=10),
            book(2, download_count=50),
            book(1, download_count=10),
        ]

        selected = select_candidates(books, frozenset(), max_books=10)

        assert [b.id for b in selected] == [2, 1, 3]

    def test_filters_blocked_and_textless(self) -> None:
        """Test that blocked subjects and books without text are dropped."""
        books = [
            book(1, subjects=["Children's stories"]),
            book(2, formats={"application/epub+zip": "https://x/2.epub"}),
            book(3, title="A Dictionary of Words"),
            book(4),
        ]

        selected = select_candidates(books, DEFAULT_BLOCKED_TERMS, max_books=10)

        assert [b.id for b in selected] == [4]

    def test_deduplicates_and_caps(self) -> None:
        """Test that repeated ids collapse and the cap applies."""
        books = [book(i % 3, download_count=i) for i in range(9)]

        selected = select_candidates(books, frozenset(), max_books=2)

        assert len(selected) == 2
        assert len({b.id for b in selected}) == 2

    def test_is_blocked_matches_bookshelves(self) -> None:
        """Test that bookshelves are searched too."""
        entry = book(1, bookshelves=["Encyclopedias"])

        assert is_blocked(entry, frozenset({"encyclopedia"}))

    def test_is_blocked_ignores_words_inside_words(self) -> None:
        """Test that blocked terms only match at word starts."""
        vegetables = book(1, subjects=["Vegetables -- History"])
        tables = book(2, title="Mathematical Tables for Engineers")

        assert not is_blocked(vegetables, frozenset({"tables"}))
        assert is_blocked(tables, frozenset({"tables"}))


class TestCatalogClient:
    """Tests for CatalogClient paging."""

    def test_single_page(self, fetcher: MagicMock) -> None:
        """Test listing from a single page."""
        fetcher.fetch.return_value = ok_result(
            DEFAULT_CATALOG_URL,
            catalog_payload([book_payload(1, download_count=5), book_payload(2)]),
        )

        candidates = CatalogClient(fetcher).list_candidates()

        assert [b.id for b in candidates] == [2, 1]
        assert RemoteMetrics.get_instance().catalog_pages_total == 1

    def test_follows_next_without_params(self, fetcher: MagicMock) -> None:
        """Test that later pages use the next link as-is."""
        fetcher.fetch.side_effect = [
            ok_result(
                DEFAULT_CATALOG_URL,
                catalog_payload([book_payload(1)], next_url=PAGE_2_URL),
            ),
            ok_result(PAGE_2_URL, catalog_payload([book_payload(2)])),
        ]

        candidates = CatalogClient(fetcher).list_candidates()

        assert {b.id for b in candidates} == {1, 2}
        first, second = fetcher.fetch.call_args_list
        assert first.kwargs["params"] is not None
        assert second.args[0] == PAGE_2_URL
        assert second.kwargs["params"] is None

    def test_stops_at_max_pages(self, fetcher: MagicMock) -> None:
        """Test that paging honors max_pages."""
        fetcher.fetch.return_value = ok_result(
            DEFAULT_CATALOG_URL,
            catalog_payload([book_payload(1)], next_url=PAGE_2_URL),
        )

        CatalogClient(fetcher, RemoteConfig(max_pages=2)).list_candidates()

        assert fetcher.fetch.call_count == 2

    def test_first_page_failure_raises(self, fetcher: MagicMock) -> None:
        """Test that an unreachable catalog is reported."""
        fetcher.fetch.return_value = failed_result(DEFAULT_CATALOG_URL)

        with pytest.raises(CatalogUnavailableError) as exc_info:
            CatalogClient(fetcher).list_candidates()

        assert exc_info.value.error_class == RemoteErrorClass.CATALOG
        assert exc_info.value.details["fetch_error"] == "CONNECTION_ERROR"

    def test_later_page_failure_keeps_earlier_books(self, fetcher: MagicMock) -> None:
        """Test that a failing second page ends paging without an error."""
        fetcher.fetch.side_effect = [
            ok_result(
                DEFAULT_CATALOG_URL,
                catalog_payload([book_payload(1)], next_url=PAGE_2_URL),
            ),
            failed_result(PAGE_2_URL, FetchErrorClass.HTTP_5XX, status_code=503),
        ]

        candidates = CatalogClient(fetcher).list_candidates()

        assert [b.id for b in candidates] == [1]

    def test_malformed_page_raises(self, fetcher: MagicMock) -> None:
        """Test that a non-catalog body is treated as unavailable."""
        fetcher.fetch.return_value = ok_result(DEFAULT_CATALOG_URL, "<html>busy</html>")

        with pytest.raises(CatalogUnavailableError):
            CatalogClient(fetcher).list_candidates()

    def test_cancel_before_start(self, fetcher: MagicMock) -> None:
        """Test that a set cancel event prevents any request."""
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(FetchCancelledError):
            CatalogClient(fetcher).list_candidates(cancel)

        fetcher.fetch.assert_not_called()

    def test_cancelled_fetch_result(self, fetcher: MagicMock) -> None:
        """Test that a cancelled request is not reported as unavailable."""
        fetcher.fetch.return_value = failed_result(
            DEFAULT_CATALOG_URL, FetchErrorClass.CANCELLED
        )

        with pytest.raises(FetchCancelledError):
            CatalogClient(fetcher).list_candidates()
