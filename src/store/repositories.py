"""Typed repositories over the key-value store.

Both repositories treat a missing or malformed blob as empty; a corrupted
value never blocks the feed.
"""

import json
from collections.abc import Iterable

import structlog
from pydantic import TypeAdapter, ValidationError

from src.config.constants import (
    CACHED_STORIES_KEY,
    COMPONENT_STORE,
    LIKED_ITEMS_KEY,
)
from src.feed.models import CachedStory, FeedItem
from src.store.kv import KeyValueStore
from src.store.metrics import StoreMetrics


logger = structlog.get_logger()

_LIKED_IDS = TypeAdapter(list[str])
_CACHED_STORIES = TypeAdapter(list[CachedStory])


class LikedItemsRepository:
    """Persists the set of liked item ids as a JSON array of strings."""

    def __init__(self, store: KeyValueStore, key: str = LIKED_ITEMS_KEY) -> None:
        """Initialize the repository.

        Args:
            store: Backing key-value store.
            key: Storage key.
        """
        self._store = store
        self._key = key
        self._metrics = StoreMetrics.get_instance()
        self._log = logger.bind(component=COMPONENT_STORE, subcomponent="likes")

    def load(self) -> set[str]:
        """Load liked ids; empty when absent or malformed."""
        blob = self._store.get_blob(self._key)
        if blob is None:
            return set()
        try:
            return set(_LIKED_IDS.validate_json(blob))
        except ValidationError as e:
            self._metrics.record_decode_failure()
            self._log.warning("liked_ids_decode_failed", error_count=e.error_count())
            return set()

    def save(self, item_ids: Iterable[str]) -> None:
        """Persist liked ids, sorted for a stable blob."""
        payload = json.dumps(sorted(set(item_ids))).encode("utf-8")
        self._store.set_blob(self._key, payload)


class StoryCacheRepository:
    """Persists remote stories as a JSON array of CachedStory records."""

    def __init__(self, store: KeyValueStore, key: str = CACHED_STORIES_KEY) -> None:
        """Initialize the repository.

        Args:
            store: Backing key-value store.
            key: Storage key.
        """
        self._store = store
        self._key = key
        self._metrics = StoreMetrics.get_instance()
        self._log = logger.bind(component=COMPONENT_STORE, subcomponent="story_cache")

    def load(self) -> list[FeedItem]:
        """Load cached stories as feed items.

        A blob that is not a valid array yields an empty list. Individual
        records that no longer satisfy FeedItem bounds are skipped.

        Returns:
            Cached feed items in stored order.
        """
        blob = self._store.get_blob(self._key)
        if blob is None:
            return []
        try:
            records = _CACHED_STORIES.validate_json(blob)
        except ValidationError as e:
            self._metrics.record_decode_failure()
            self._log.warning("story_cache_decode_failed", error_count=e.error_count())
            return []

        items: list[FeedItem] = []
        for record in records:
            try:
                items.append(record.to_feed_item())
            except ValidationError:
                self._metrics.record_decode_failure()
                self._log.warning("cached_story_skipped", story_id=record.id)
        return items

    def save(self, items: Iterable[FeedItem]) -> int:
        """Overwrite the cache with ``items``.

        Returns:
            Number of stories written.
        """
        records = [CachedStory.from_feed_item(item) for item in items]
        self._store.set_blob(self._key, _CACHED_STORIES.dump_json(records))
        self._log.info("story_cache_written", stories=len(records))
        return len(records)
