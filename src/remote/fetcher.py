"""Remote story fetching with bounded fan-out and graceful fallback."""

import threading
import time
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from enum import Enum

import structlog

from src.config.constants import COMPONENT_REMOTE
from src.config.schemas import FeedEngineConfig
from src.feed.models import FeedItem
from src.fetch.client import HttpFetcher
from src.fetch.models import FetchErrorClass
from src.pool.seed import text_fingerprint
from src.ranker.impact import ImpactScorer
from src.remote.catalog import CatalogClient
from src.remote.errors import (
    BookTextUnavailableError,
    FetchCancelledError,
    NoStoriesExtractedError,
    RemoteFetchError,
)
from src.remote.extractor import TextExtractor
from src.remote.metrics import RemoteMetrics
from src.remote.models import RemoteBook
from src.store.errors import StateStoreError
from src.store.kv import KeyValueStore
from src.store.repositories import StoryCacheRepository


logger = structlog.get_logger()


class StorySource(str, Enum):
    """Where the stories of a fetch outcome came from."""

    REMOTE = "remote"
    CACHE = "cache"
    LOCAL = "local"


@dataclass(frozen=True)
class RemoteFetchOutcome:
    """Stories returned by a fetch run plus how they were obtained.

    Attributes:
        items: Stories for the feed.
        source: Remote, cache fallback or local fallback.
        error: The failure that triggered a fallback, if any.
        duration_ms: Wall time of the run.
    """

    items: list[FeedItem]
    source: StorySource
    error: RemoteFetchError | None = None
    duration_ms: float = 0.0

    @property
    def used_fallback(self) -> bool:
        """Whether the stories did not come from the network."""
        return self.source != StorySource.REMOTE


def rank_and_deduplicate(items: Sequence[FeedItem], max_stories: int) -> list[FeedItem]:
    """Order stories by impact and drop repeats.

    Ties keep input order. A story is a repeat when its id, quote or body
    fingerprint was already kept.

    Args:
        items: Stories in candidate order.
        max_stories: Cap on the result.

    Returns:
        At most ``max_stories`` unique stories, best first.
    """
    ranked = sorted(enumerate(items), key=lambda pair: (-pair[1].impact_score, pair[0]))
    seen: set[str] = set()
    kept: list[FeedItem] = []
    for _, item in ranked:
        keys = {
            f"id:{item.id}",
            f"quote:{text_fingerprint(item.quote)}",
            f"body:{text_fingerprint(item.body)}",
        }
        if keys & seen:
            continue
        seen |= keys
        kept.append(item)
        if len(kept) == max_stories:
            break
    return kept


class RemoteStoryFetcher:
    """Builds feed stories from the remote book catalog.

    One task per candidate book runs on a bounded thread pool. Tasks share
    nothing; their results are concatenated in candidate order only after
    every task has finished. A book that fails contributes no stories.

    ``fetch_stories`` never raises: when the run fails as a whole it returns
    the cached stories from the previous success, or the local seed pool
    when the cache is empty.
    """

    def __init__(  # noqa: PLR0913
        self,
        http: HttpFetcher,
        store: KeyValueStore,
        local_pool: Callable[[], Sequence[FeedItem]],
        config: FeedEngineConfig | None = None,
        catalog: CatalogClient | None = None,
        extractor: TextExtractor | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            http: Shared HTTP fetcher.
            store: Key-value store holding the story cache.
            local_pool: Supplier of the local seed pool, called only when
                both the network and the cache fail.
            config: Engine configuration.
            catalog: Catalog client (built from ``http`` when omitted).
            extractor: Text extractor (built from config when omitted).
        """
        self._config = config or FeedEngineConfig()
        self._http = http
        self._cache = StoryCacheRepository(store)
        self._local_pool = local_pool
        self._catalog = catalog or CatalogClient(http, self._config.remote)
        self._extractor = extractor or TextExtractor(
            self._config.remote,
            self._config.pool,
            ImpactScorer(self._config.impact),
        )
        self._metrics = RemoteMetrics.get_instance()
        self._log = logger.bind(component=COMPONENT_REMOTE, subcomponent="fetcher")

    def fetch_stories(self, cancel: threading.Event | None = None) -> list[FeedItem]:
        """Fetch stories, degrading to cache and then local pool.

        Args:
            cancel: Event that, once set, stops new requests and selects the
                fallback without writing the cache.

        Returns:
            Stories for the feed; never raises.
        """
        return self.fetch_outcome(cancel).items

    def fetch_outcome(self, cancel: threading.Event | None = None) -> RemoteFetchOutcome:
        """Like ``fetch_stories`` but also reports where stories came from."""
        start_ns = time.perf_counter_ns()
        try:
            items = self._fetch_remote(cancel)
        except RemoteFetchError as e:
            self._log.warning("remote_fetch_failed", **e.to_dict())
            return self._fallback(e, start_ns)
        except Exception as e:  # noqa: BLE001
            self._log.error("remote_fetch_unexpected_error", error=str(e))
            return self._fallback(None, start_ns)

        self._save_cache(items)
        self._metrics.record_stories(len(items))
        duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
        self._log.info(
            "remote_fetch_complete",
            stories=len(items),
            duration_ms=round(duration_ms, 2),
        )
        return RemoteFetchOutcome(
            items=items, source=StorySource.REMOTE, duration_ms=duration_ms
        )

    def _fetch_remote(self, cancel: threading.Event | None) -> list[FeedItem]:
        """Run catalog listing, book fan-out, ranking and dedupe.

        Raises:
            RemoteFetchError: If the catalog fails, the run is cancelled or
                no story survives.
        """
        candidates = self._catalog.list_candidates(cancel)
        stories = self._fetch_books(candidates, cancel)

        if cancel is not None and cancel.is_set():
            raise FetchCancelledError("Cancelled while fetching books")

        ranked = rank_and_deduplicate(stories, self._config.remote.max_stories)
        if not ranked:
            raise NoStoriesExtractedError(len(candidates))
        return ranked

    def _fetch_books(
        self,
        books: Sequence[RemoteBook],
        cancel: threading.Event | None,
    ) -> list[FeedItem]:
        """Fan out one task per book and concatenate results in book order."""
        results: list[list[FeedItem]] = [[] for _ in books]
        if not books:
            return []

        workers = min(self._config.remote.max_workers, len(books))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_index: dict[Future[list[FeedItem]], int] = {
                executor.submit(self._fetch_book, book, cancel): i
                for i, book in enumerate(books)
            }

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                book = books[index]
                try:
                    results[index] = future.result()
                except RemoteFetchError as e:
                    self._log.warning("book_extraction_failed", **e.to_dict())
                except Exception as e:  # noqa: BLE001
                    self._log.error(
                        "book_execution_error", book_id=book.id, error=str(e)
                    )
                self._metrics.record_book(succeeded=bool(results[index]))

                if cancel is not None and cancel.is_set():
                    for pending in future_to_index:
                        pending.cancel()
                    break

        return [item for items in results for item in items]

    def _fetch_book(
        self, book: RemoteBook, cancel: threading.Event | None
    ) -> list[FeedItem]:
        """Download and extract one book.

        Raises:
            FetchCancelledError: If cancelled before or during the download.
            BookTextUnavailableError: If the text cannot be downloaded.
        """
        if cancel is not None and cancel.is_set():
            raise FetchCancelledError(f"Cancelled before book {book.id}")

        url = book.plain_text_url
        if url is None:
            raise BookTextUnavailableError("No plain-text format", book_id=book.id)

        result = self._http.fetch(url, cancel=cancel)
        if not result.is_success:
            error_class = result.error.error_class if result.error else None
            if error_class == FetchErrorClass.CANCELLED:
                raise FetchCancelledError(f"Cancelled during book {book.id}")
            raise BookTextUnavailableError(
                "Book text download failed",
                book_id=book.id,
                url=url,
                fetch_error=error_class.value if error_class else None,
            )

        return self._extractor.extract(book, result.text())

    def _save_cache(self, items: list[FeedItem]) -> None:
        """Overwrite the story cache; a store failure only logs."""
        try:
            self._cache.save(items)
        except StateStoreError as e:
            self._log.warning("story_cache_write_failed", error=str(e))

    def _fallback(
        self, error: RemoteFetchError | None, start_ns: int
    ) -> RemoteFetchOutcome:
        """Return cached stories, else the local seed pool."""
        duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000

        try:
            cached = self._cache.load()
        except StateStoreError as e:
            self._log.warning("story_cache_read_failed", error=str(e))
            cached = []

        if cached:
            self._metrics.record_fallback(StorySource.CACHE.value)
            self._log.info(
                "remote_fallback_used", kind=StorySource.CACHE.value, stories=len(cached)
            )
            return RemoteFetchOutcome(
                items=cached,
                source=StorySource.CACHE,
                error=error,
                duration_ms=duration_ms,
            )

        try:
            local = list(self._local_pool())
        except Exception as e:  # noqa: BLE001
            self._log.error("local_pool_unavailable", error=str(e))
            local = []

        self._metrics.record_fallback(StorySource.LOCAL.value)
        self._log.info(
            "remote_fallback_used", kind=StorySource.LOCAL.value, stories=len(local)
        )
        return RemoteFetchOutcome(
            items=local,
            source=StorySource.LOCAL,
            error=error,
            duration_ms=duration_ms,
        )
