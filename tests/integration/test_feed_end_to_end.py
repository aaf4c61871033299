"""Integration tests: packaged library to a scrolling feed."""

from collections.abc import Generator
from pathlib import Path

import pytest

from src.config.schemas import FeedEngineConfig
from src.feed.controller import FeedController, FeedEvent, FeedEventKind
from src.feed.merge import merge_pools
from src.feed.metrics import FeedMetrics
from src.feed.session import FeedSession
from src.library.models import PassageCategory
from src.pool.builder import build_seed_pool
from src.store.kv import SqliteKeyValueStore
from src.store.repositories import LikedItemsRepository, StoryCacheRepository


@pytest.fixture(autouse=True)
def reset_metrics() -> Generator[None, None, None]:
    """Reset the feed metrics singleton around each test."""
    FeedMetrics.reset()
    yield
    FeedMetrics.reset()


@pytest.fixture
def store(tmp_path: Path) -> Generator[SqliteKeyValueStore, None, None]:
    """SQLite state store in a temporary directory."""
    with SqliteKeyValueStore(tmp_path / "state.sqlite") as kv:
        yield kv


def start_feed(store: SqliteKeyValueStore, seed: int = 42) -> FeedController:
    config = FeedEngineConfig()
    pool = merge_pools(
        StoryCacheRepository(store).load(),
        build_seed_pool(config.pool),
        replace_threshold=config.feed.remote_replace_threshold,
        max_size=config.feed.max_pool_size,
    )
    session = FeedSession(pool, LikedItemsRepository(store), config.feed, seed=seed)
    controller = FeedController(session)
    controller.start()
    return controller


class TestScrollingFeed:
    """Boot, scroll and prefetch over the packaged pool."""

    def test_boot_and_one_prefetch(self, store: SqliteKeyValueStore) -> None:
        """Test that booting and scrolling to the prefetch zone yields 72 cards."""
        controller = start_feed(store)
        events: list[FeedEvent] = []
        controller.add_listener(events.append)

        for index in range(41):
            controller.item_did_appear(index)

        assert len(controller.session.rendered) == 72
        batch_events = [e for e in events if e.kind == FeedEventKind.BATCH_APPENDED]
        assert len(batch_events) == 1
        assert len(controller.read_item_ids) > 1

    def test_every_card_renders(self, store: SqliteKeyValueStore) -> None:
        """Test that every served card has a quote, body and share text."""
        controller = start_feed(store)

        for entry in controller.session.rendered:
            item = entry.item
            assert item.quote
            assert item.body
            assert item.quote in item.share_text

    def test_likes_survive_restart(self, store: SqliteKeyValueStore) -> None:
        """Test that a like is visible in a new session on the same store."""
        controller = start_feed(store)
        controller.like(0)
        liked_id = controller.session.rendered[0].item.id

        restarted = start_feed(store, seed=7)

        assert restarted.session.is_liked(liked_id)

    def test_category_filter_then_scroll(self, store: SqliteKeyValueStore) -> None:
        """Test scrolling a filtered feed past one pool cycle."""
        controller = start_feed(store)
        session = controller.session

        session.set_category_filter([PassageCategory.PHILOSOPHY])
        controller.start()
        for index in range(48):
            controller.item_did_appear(index)

        categories = {entry.item.category for entry in session.rendered}
        assert categories == {PassageCategory.PHILOSOPHY}
        assert len(session.rendered) >= 72
