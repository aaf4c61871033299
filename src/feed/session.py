"""Infinite, category-filterable feed session."""

import random
import threading
import uuid
from collections.abc import Iterable, Sequence

import structlog

from src.config.constants import COMPONENT_FEED
from src.config.schemas import FeedConfig
from src.feed.metrics import FeedMetrics
from src.feed.models import FeedItem, RenderItem
from src.library.models import PassageCategory
from src.pool.seed import format_like_count
from src.store.errors import StateStoreError
from src.store.repositories import LikedItemsRepository


logger = structlog.get_logger()


class FeedSession:
    """Serves an endless feed from a fixed master pool.

    The master pool is an immutable tuple and may be read without locking.
    Everything else (active pool, cursor, rendered list, likes) is mutated
    only under the session lock.

    Serving model:
        - the active pool is the master pool filtered by the selected
          categories (the whole pool when the filter matches nothing),
          capped and shuffled with the session's seeded generator;
        - batches are drawn from a cursor over the active pool, which is
          reshuffled and restarted when exhausted;
        - scrolling to within ``prefetch_threshold`` of the end appends a
          batch.

    With the same master pool, configuration and seed, the sequence of
    batches is identical across runs.
    """

    def __init__(
        self,
        master_pool: Sequence[FeedItem],
        likes: LikedItemsRepository,
        config: FeedConfig | None = None,
        seed: int | None = None,
        session_id: str | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            master_pool: All items the session may serve.
            likes: Persistence for liked item ids.
            config: Batch, prefetch and pool size settings.
            seed: Shuffle seed; None seeds from system entropy.
            session_id: Identifier for log context.
        """
        self._config = config or FeedConfig()
        self._likes_repository = likes
        self._rng = random.Random(seed)  # noqa: S311
        self._session_id = session_id or str(uuid.uuid4())[:8]
        self._lock = threading.RLock()
        self._metrics = FeedMetrics.get_instance()
        self._log = logger.bind(component=COMPONENT_FEED, session_id=self._session_id)

        self._master: tuple[FeedItem, ...] = ()
        self._by_id: dict[str, FeedItem] = {}
        self._selected: frozenset[PassageCategory] = frozenset()
        self._active: list[FeedItem] = []
        self._cursor = 0
        self._rendered: list[RenderItem] = []
        self._liked: set[str] = self._load_likes()

        self._install_pool(master_pool)
        self._rebuild_active()

    @property
    def session_id(self) -> str:
        """Session identifier."""
        return self._session_id

    @property
    def master_pool(self) -> tuple[FeedItem, ...]:
        """Immutable master pool."""
        return self._master

    @property
    def active_pool_size(self) -> int:
        """Number of items in the current active pool."""
        with self._lock:
            return len(self._active)

    @property
    def selected_categories(self) -> frozenset[PassageCategory]:
        """Current category filter; empty means all categories."""
        with self._lock:
            return self._selected

    @property
    def rendered(self) -> list[RenderItem]:
        """Snapshot of the rendered feed."""
        with self._lock:
            return list(self._rendered)

    @property
    def liked_ids(self) -> frozenset[str]:
        """Snapshot of liked item ids."""
        with self._lock:
            return frozenset(self._liked)

    def rendered_item(self, position: int) -> RenderItem | None:
        """Rendered item at ``position``, or None when out of range."""
        with self._lock:
            if 0 <= position < len(self._rendered):
                return self._rendered[position]
            return None

    def boot(self) -> list[RenderItem]:
        """Append the initial batches when the feed is empty.

        Returns:
            Items appended; empty if the feed was already booted.
        """
        with self._lock:
            if self._rendered:
                return []
            appended: list[RenderItem] = []
            for _ in range(self._config.initial_batches):
                appended.extend(self.append_batch())
            self._log.info("feed_booted", rendered=len(self._rendered))
            return appended

    def append_batch(self) -> list[RenderItem]:
        """Draw one batch and append it to the rendered feed.

        Returns:
            Newly rendered items; empty when the pool is empty.
        """
        with self._lock:
            items = self._draw(self._config.batch_size)
            if not items:
                return []
            start = len(self._rendered)
            batch = [
                RenderItem(position=start + i, item=item)
                for i, item in enumerate(items)
            ]
            self._rendered.extend(batch)
            self._metrics.record_batch()
            self._log.debug(
                "batch_appended",
                size=len(batch),
                rendered=len(self._rendered),
                cursor=self._cursor,
            )
            return batch

    def get_next_batch(self, n: int | None = None) -> list[FeedItem]:
        """Draw ``n`` items without touching the rendered feed.

        Shares the cursor with ``append_batch``.

        Args:
            n: Batch size; the configured batch size when omitted.

        Returns:
            Drawn items; empty when the pool is empty or ``n`` is 0.
        """
        with self._lock:
            return self._draw(self._config.batch_size if n is None else n)

    def on_visible_index(self, index: int) -> list[RenderItem]:
        """Prefetch when ``index`` is near the end of the rendered feed.

        Args:
            index: Position of the item that became visible.

        Returns:
            Items appended by the prefetch; empty when none was needed.
        """
        with self._lock:
            if index >= len(self._rendered) - self._config.prefetch_threshold:
                return self.append_batch()
            return []

    def set_category_filter(self, categories: Iterable[PassageCategory]) -> None:
        """Filter the feed to ``categories`` and restart it.

        An empty selection means all categories. The rendered feed is
        cleared; call ``boot`` to repopulate it.
        """
        with self._lock:
            self._selected = frozenset(categories)
            self._rebuild_active()
            self._rendered.clear()

    def rebuild(self, categories: Iterable[PassageCategory] | None = None) -> None:
        """Re-filter and reshuffle, keeping the current filter when omitted."""
        with self._lock:
            selection = self._selected if categories is None else categories
            self.set_category_filter(selection)

    def replace_pool(self, master_pool: Sequence[FeedItem]) -> None:
        """Swap in a new master pool (e.g. after a remote refresh) and restart."""
        with self._lock:
            self._install_pool(master_pool)
            self._rebuild_active()
            self._rendered.clear()

    def toggle_like(self, item_id: str) -> bool:
        """Flip the like state of an item and persist the set immediately.

        The in-memory state changes only once the new set is stored; when
        the store rejects the write the toggle is dropped and logged.

        Returns:
            True if the item is liked after the call.
        """
        with self._lock:
            liked = item_id not in self._liked
            updated = self._liked | {item_id} if liked else self._liked - {item_id}
            try:
                self._likes_repository.save(updated)
            except StateStoreError as e:
                self._log.error(
                    "like_persist_failed", item_id=item_id, liked=liked, error=str(e)
                )
                return not liked
            self._liked = updated
            self._metrics.record_like_toggle()
            self._log.info("like_toggled", item_id=item_id, liked=liked)
            return liked

    def is_liked(self, item_id: str) -> bool:
        """Whether an item is liked."""
        with self._lock:
            return item_id in self._liked

    def like_count(self, item_id: str) -> int:
        """Displayed like count: the item's seed plus one if liked."""
        item = self._by_id.get(item_id)
        base = item.like_seed if item is not None else 0
        return base + (1 if self.is_liked(item_id) else 0)

    def like_label(self, item_id: str) -> str:
        """Compact like count, e.g. ``"1.2K"``."""
        return format_like_count(self.like_count(item_id))

    def share_text(self, item_id: str) -> str:
        """Share text of a known item; empty string for an unknown id."""
        item = self._by_id.get(item_id)
        if item is None:
            self._log.warning("share_unknown_item", item_id=item_id)
            return ""
        return item.share_text

    def _load_likes(self) -> set[str]:
        try:
            return self._likes_repository.load()
        except StateStoreError as e:
            self._log.error("likes_load_failed", error=str(e))
            return set()

    def _install_pool(self, master_pool: Sequence[FeedItem]) -> None:
        self._master = tuple(master_pool)
        self._by_id = {item.id: item for item in self._master}

    def _rebuild_active(self) -> None:
        """Filter, cap and shuffle the active pool; reset the cursor."""
        filtered = [
            item
            for item in self._master
            if not self._selected or item.category in self._selected
        ]
        fell_back = bool(self._selected) and not filtered
        if fell_back:
            filtered = list(self._master)
            self._log.info(
                "category_filter_empty",
                categories=sorted(c.value for c in self._selected),
            )

        self._active = filtered[: self._config.max_pool_size]
        self._rng.shuffle(self._active)
        self._cursor = 0
        self._metrics.record_rebuild(fell_back)
        self._log.debug(
            "active_pool_rebuilt",
            master=len(self._master),
            active=len(self._active),
            fell_back=fell_back,
        )

    def _draw(self, n: int) -> list[FeedItem]:
        """Take ``n`` items from the cursor, reshuffling on exhaustion."""
        if not self._active or n <= 0:
            return []
        items: list[FeedItem] = []
        while len(items) < n:
            if self._cursor >= len(self._active):
                self._rng.shuffle(self._active)
                self._cursor = 0
                self._metrics.record_reshuffle()
            items.append(self._active[self._cursor])
            self._cursor += 1
        self._metrics.record_served(len(items))
        return items
