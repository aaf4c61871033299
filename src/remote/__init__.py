"""Remote story fetching from a public-domain book catalog.

This module provides:
- Paged catalog listing with low-signal filtering
- Boilerplate stripping and section extraction from plain-text books
- Bounded parallel fetching with cache and local-pool fallback
"""

from src.remote.catalog import CatalogClient, is_blocked, select_candidates
from src.remote.errors import (
    BookTextUnavailableError,
    CatalogUnavailableError,
    FetchCancelledError,
    NoStoriesExtractedError,
    RemoteErrorClass,
    RemoteFetchError,
)
from src.remote.extractor import (
    TextExtractor,
    clean_title,
    infer_category,
    strip_boilerplate,
    unwrap_paragraphs,
)
from src.remote.fetcher import (
    RemoteFetchOutcome,
    RemoteStoryFetcher,
    StorySource,
    rank_and_deduplicate,
)
from src.remote.metrics import RemoteMetrics
from src.remote.models import CatalogPage, RemoteAuthor, RemoteBook


__all__ = [
    # Catalog
    "CatalogClient",
    "is_blocked",
    "select_candidates",
    # Errors
    "BookTextUnavailableError",
    "CatalogUnavailableError",
    "FetchCancelledError",
    "NoStoriesExtractedError",
    "RemoteErrorClass",
    "RemoteFetchError",
    # Extraction
    "TextExtractor",
    "clean_title",
    "infer_category",
    "strip_boilerplate",
    "unwrap_paragraphs",
    # Fetcher
    "RemoteFetchOutcome",
    "RemoteStoryFetcher",
    "StorySource",
    "rank_and_deduplicate",
    # Metrics
    "RemoteMetrics",
    # Models
    "CatalogPage",
    "RemoteAuthor",
    "RemoteBook",
]
