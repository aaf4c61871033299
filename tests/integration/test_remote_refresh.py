"""Integration tests: remote refresh through the HTTP layer into the feed."""

import threading
from collections.abc import Generator
from pathlib import Path

import httpx
import pytest

from src.config.constants import DEFAULT_CATALOG_URL
from src.config.schemas import FeedEngineConfig
from src.feed.merge import merge_pools
from src.feed.models import ItemOrigin
from src.fetch.client import HttpFetcher
from src.fetch.config import FetchConfig
from src.fetch.metrics import FetchMetrics
from src.fetch.models import RetryPolicy
from src.pool.builder import build_seed_pool
from src.remote.fetcher import RemoteStoryFetcher, StorySource
from src.remote.metrics import RemoteMetrics
from src.store.kv import SqliteKeyValueStore
from tests.helpers.fixtures import book_payload, catalog_payload, make_gutenberg_text


BOOK_IDS = (1342, 2701, 84, 11)

FAST_FETCH = FetchConfig(retry_policy=RetryPolicy(max_retries=0))


@pytest.fixture(autouse=True)
def reset_metrics() -> Generator[None, None, None]:
    """Reset metrics singletons around each test."""
    FetchMetrics.reset()
    RemoteMetrics.reset()
    yield
    FetchMetrics.reset()
    RemoteMetrics.reset()


@pytest.fixture
def store(tmp_path: Path) -> Generator[SqliteKeyValueStore, None, None]:
    """SQLite state store in a temporary directory."""
    with SqliteKeyValueStore(tmp_path / "state.sqlite") as kv:
        yield kv


def library_handler(request: httpx.Request) -> httpx.Response:
    """Serve a small catalog and its plain-text books."""
    url = str(request.url)
    if url.startswith(DEFAULT_CATALOG_URL):
        books = [
            book_payload(
                book_id,
                title=f"Volume {book_id}",
                subjects=["Philosophy", "Ethics"] if book_id % 2 else ["History"],
            )
            for book_id in BOOK_IDS
        ]
        return httpx.Response(200, json=catalog_payload(books))
    for book_id in BOOK_IDS:
        if url == f"https://example.org/{book_id}.txt":
            text = make_gutenberg_text(12, title=f"Volume {book_id}")
            return httpx.Response(200, text=text)
    return httpx.Response(404)


def offline_handler(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("offline", request=request)


def make_fetcher(store: SqliteKeyValueStore, handler: object) -> RemoteStoryFetcher:
    config = FeedEngineConfig(fetch=FAST_FETCH)
    http = HttpFetcher(config.fetch, transport=httpx.MockTransport(handler))  # type: ignore[arg-type]
    return RemoteStoryFetcher(
        http, store, local_pool=lambda: build_seed_pool(config.pool), config=config
    )


class TestRemoteRefresh:
    """Online refresh, offline restart."""

    def test_online_then_offline(self, store: SqliteKeyValueStore) -> None:
        """Test that an offline run serves what the online run cached."""
        online = make_fetcher(store, library_handler).fetch_outcome()

        assert online.source == StorySource.REMOTE
        assert {item.id.split("-")[1] for item in online.items} == {
            str(book_id) for book_id in BOOK_IDS
        }

        offline = make_fetcher(store, offline_handler).fetch_outcome()

        assert offline.source == StorySource.CACHE
        assert offline.items == online.items

    def test_first_run_offline_uses_local_pool(
        self, store: SqliteKeyValueStore
    ) -> None:
        """Test that an offline first run serves the packaged pool."""
        outcome = make_fetcher(store, offline_handler).fetch_outcome()

        assert outcome.source == StorySource.LOCAL
        assert {item.origin for item in outcome.items} <= {
            ItemOrigin.CURATED,
            ItemOrigin.PASSAGE,
        }
        assert outcome.items

    def test_categories_inferred(self, store: SqliteKeyValueStore) -> None:
        """Test that subjects map to categories."""
        items = make_fetcher(store, library_handler).fetch_stories()

        by_book = {item.id.split("-")[1]: item.category.value for item in items}
        assert by_book["2701"] == "Philosophy"
        assert by_book["1342"] == "History"

    def test_merged_pool_keeps_local_when_remote_small(
        self, store: SqliteKeyValueStore
    ) -> None:
        """Test merging a small remote set with the local pool."""
        config = FeedEngineConfig()
        remote = make_fetcher(store, library_handler).fetch_stories()
        local = build_seed_pool(config.pool)

        merged = merge_pools(remote, local, replace_threshold=24)

        assert merged[: len(remote)] == remote
        assert len(merged) == len(remote) + len(local)

    def test_cancel_leaves_cache_empty(self, store: SqliteKeyValueStore) -> None:
        """Test that a cancelled refresh does not write the cache."""
        cancel = threading.Event()
        cancel.set()

        outcome = make_fetcher(store, library_handler).fetch_outcome(cancel)

        assert outcome.used_fallback
        assert store.keys() == []
