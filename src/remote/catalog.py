"""Paged catalog listing and candidate book selection."""

import threading
from functools import lru_cache
from re import Pattern

import structlog
from pydantic import ValidationError

from src.config.constants import COMPONENT_REMOTE
from src.config.schemas import RemoteConfig
from src.fetch.client import HttpFetcher
from src.fetch.models import FetchErrorClass
from src.ranker.lexicon import compile_keyword_pattern
from src.remote.constants import CATALOG_QUERY
from src.remote.errors import CatalogUnavailableError, FetchCancelledError
from src.remote.metrics import RemoteMetrics
from src.remote.models import CatalogPage, RemoteBook


logger = structlog.get_logger()


@lru_cache(maxsize=8)
def _blocked_patterns(blocked_terms: frozenset[str]) -> tuple[Pattern[str], ...]:
    return tuple(compile_keyword_pattern(term) for term in sorted(blocked_terms))


def is_blocked(book: RemoteBook, blocked_terms: frozenset[str]) -> bool:
    """Whether a blocked term starts a word in the title, subjects or shelves.

    Terms match at word starts only, so "tables" blocks "Mathematical
    tables" but not "Vegetables".
    """
    patterns = _blocked_patterns(blocked_terms)
    return any(
        pattern.search(text) for text in book.searchable_terms for pattern in patterns
    )


def select_candidates(
    books: list[RemoteBook],
    blocked_terms: frozenset[str],
    max_books: int,
) -> list[RemoteBook]:
    """Filter, deduplicate, order and cap catalog entries.

    Args:
        books: Entries from every fetched page, in page order.
        blocked_terms: Lowercase low-signal terms.
        max_books: Cap on the result.

    Returns:
        Books with a plain-text URL and no blocked term, unique by id,
        sorted by download count descending then id ascending.
    """
    unique: dict[int, RemoteBook] = {}
    for book in books:
        if book.id in unique or book.plain_text_url is None:
            continue
        if is_blocked(book, blocked_terms):
            continue
        unique[book.id] = book

    ranked = sorted(unique.values(), key=lambda b: (-b.download_count, b.id))
    return ranked[:max_books]


class CatalogClient:
    """Lists candidate books from the remote catalog.

    Follows the ``next`` link up to ``max_pages`` pages. A failure on the
    first page is fatal for the run; a failure on a later page ends paging
    and keeps what was already collected.
    """

    def __init__(self, fetcher: HttpFetcher, config: RemoteConfig | None = None) -> None:
        """Initialize the catalog client.

        Args:
            fetcher: Shared HTTP fetcher.
            config: Remote configuration.
        """
        self._fetcher = fetcher
        self._config = config or RemoteConfig()
        self._metrics = RemoteMetrics.get_instance()
        self._log = logger.bind(component=COMPONENT_REMOTE, subcomponent="catalog")

    def list_candidates(self, cancel: threading.Event | None = None) -> list[RemoteBook]:
        """Fetch catalog pages and select candidate books.

        Args:
            cancel: Event that, once set, stops paging.

        Returns:
            Candidate books, best first.

        Raises:
            CatalogUnavailableError: If the first page cannot be fetched or
                parsed.
            FetchCancelledError: If ``cancel`` is set before paging finishes.
        """
        books: list[RemoteBook] = []
        url: str | None = self._config.catalog_url
        params: dict[str, str] | None = dict(CATALOG_QUERY)

        for page_number in range(1, self._config.max_pages + 1):
            if url is None:
                break
            if cancel is not None and cancel.is_set():
                raise FetchCancelledError("Cancelled while listing catalog")

            try:
                page = self._fetch_page(url, params, cancel)
            except CatalogUnavailableError as e:
                if page_number == 1:
                    raise
                self._log.warning(
                    "catalog_page_failed", page=page_number, **e.to_dict()
                )
                break

            self._metrics.record_catalog_page()
            self._log.info(
                "catalog_page_fetched",
                page=page_number,
                results=len(page.results),
                has_next=page.next is not None,
            )
            books.extend(page.results)
            url = page.next
            # The next link already carries the query string
            params = None

        if cancel is not None and cancel.is_set():
            raise FetchCancelledError("Cancelled while listing catalog")

        candidates = select_candidates(
            books, self._config.blocked_terms, self._config.max_books
        )
        self._log.info(
            "catalog_candidates_selected",
            listed=len(books),
            candidates=len(candidates),
        )
        return candidates

    def _fetch_page(
        self,
        url: str,
        params: dict[str, str] | None,
        cancel: threading.Event | None,
    ) -> CatalogPage:
        """Fetch and parse one catalog page.

        Raises:
            CatalogUnavailableError: If the request fails or the body is not
                a catalog page.
            FetchCancelledError: If the request was cancelled.
        """
        result = self._fetcher.fetch(url, params=params, cancel=cancel)
        error_class = result.error.error_class if result.error else None
        if error_class == FetchErrorClass.CANCELLED:
            raise FetchCancelledError("Cancelled while listing catalog")
        if not result.is_success:
            raise CatalogUnavailableError(
                "Catalog page request failed",
                url=url,
                status_code=result.status_code or None,
                fetch_error=error_class.value if error_class else None,
            )
        try:
            return CatalogPage.model_validate_json(result.body_bytes)
        except ValidationError as e:
            raise CatalogUnavailableError(
                f"Malformed catalog page: {e.error_count()} errors", url=url
            ) from e
