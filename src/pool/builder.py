"""Builds the local seed pool from the passage library and curated stories."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import structlog

from src.config.constants import (
    BODY_MIN_CHARS,
    COMPONENT_POOL,
    QUOTE_MAX_CHARS,
    QUOTE_MIN_CHARS,
)
from src.config.schemas import PoolConfig
from src.feed.models import FeedItem, ItemOrigin
from src.library.loader import default_curated_stories, default_library
from src.library.models import CuratedStory, Passage
from src.pool.derive import clamp_body, derive_quote
from src.pool.seed import like_seed, text_fingerprint
from src.pool.share import build_share_text
from src.ranker.impact import ImpactScorer
from src.ranker.models import TextUnit
from src.text.segmenter import split_into_segments
from src.text.sentences import compact_excerpt, normalize_quote


logger = structlog.get_logger()


@dataclass(frozen=True)
class PoolBuildSummary:
    """Counters from a pool build, for logging and tests.

    Attributes:
        passages_in: Passages processed.
        curated_in: Curated stories processed.
        segments_total: Segments produced by the segmenter.
        segments_kept: Segments kept after scoring.
        duplicates_dropped: Items dropped as duplicates.
        items_out: Items in the final pool.
    """

    passages_in: int
    curated_in: int
    segments_total: int
    segments_kept: int
    duplicates_dropped: int
    items_out: int


class PoolBuilder:
    """Converts passages into a deterministic, deduplicated feed pool.

    Per passage: segment the body, score every segment, keep those at or
    above the threshold (or the best few when none pass), then derive quote,
    excerpt and share text for each kept segment. Passage items are
    interleaved round-robin by segment offset so consecutive cards come from
    different passages; curated items lead the pool.

    Building involves no randomness: the same inputs always yield the same
    pool in the same order.
    """

    def __init__(
        self,
        config: PoolConfig | None = None,
        scorer: ImpactScorer | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            config: Pool configuration; defaults when omitted.
            scorer: Impact scorer; a default one is created when omitted.
        """
        self._config = config or PoolConfig()
        self._scorer = scorer or ImpactScorer()
        self._log = logger.bind(component=COMPONENT_POOL)
        self._last_summary: PoolBuildSummary | None = None

    @property
    def last_summary(self) -> PoolBuildSummary | None:
        """Summary of the most recent build."""
        return self._last_summary

    def build(
        self,
        passages: Sequence[Passage],
        curated: Sequence[CuratedStory] = (),
    ) -> list[FeedItem]:
        """Build the pool.

        Args:
            passages: Passage library.
            curated: Curated editorial stories.

        Returns:
            Deduplicated pool, curated items first, then interleaved passage
            items.
        """
        curated_items = [self.item_for_curated(story) for story in curated]

        per_passage: list[list[FeedItem]] = []
        segments_total = 0
        for passage in passages:
            items, segment_count = self._items_for_passage(passage)
            segments_total += segment_count
            per_passage.append(items)

        segments_kept = sum(len(items) for items in per_passage)
        candidates = curated_items + list(_interleave(per_passage))
        pool = _deduplicate(candidates)

        self._last_summary = PoolBuildSummary(
            passages_in=len(passages),
            curated_in=len(curated),
            segments_total=segments_total,
            segments_kept=segments_kept,
            duplicates_dropped=len(candidates) - len(pool),
            items_out=len(pool),
        )
        self._log.info(
            "segment_pool_built",
            passages_in=len(passages),
            curated_in=len(curated),
            segments_total=segments_total,
            segments_kept=segments_kept,
            items_out=len(pool),
        )
        return pool

    def items_for_passage(self, passage: Passage) -> list[FeedItem]:
        """Feed items derived from a single passage, in document order."""
        items, _ = self._items_for_passage(passage)
        return items

    def _items_for_passage(self, passage: Passage) -> tuple[list[FeedItem], int]:
        """Segment, score, select and derive items for one passage.

        Returns:
            Tuple of (items, number of segments before selection).
        """
        segments = split_into_segments(
            passage.content,
            target_chars=self._config.segment_target_chars,
            min_paragraph_chars=self._config.min_paragraph_chars,
        )
        segments = [s for s in segments if len(s) >= BODY_MIN_CHARS]
        if not segments:
            fallback = passage.content.strip()
            if len(fallback) < BODY_MIN_CHARS:
                self._log.warning("passage_too_short", passage_id=passage.id)
                return [], 0
            segments = [fallback]

        scored = self._scorer.rank(segments, passage.category, TextUnit.SEGMENT)
        kept = self._scorer.select_top(
            scored,
            threshold=self._config.keep_threshold,
            fallback_top_n=self._config.fallback_top_n,
        )

        items = [
            self._make_passage_item(
                passage,
                body=entry.text,
                segment_index=entry.index + 1,
                total_segments=len(segments),
                impact=entry.total,
            )
            for entry in kept
        ]
        return items, len(segments)

    def _make_passage_item(  # noqa: PLR0913
        self,
        passage: Passage,
        body: str,
        segment_index: int,
        total_segments: int,
        impact: float,
    ) -> FeedItem:
        """Derive a feed item from one kept segment."""
        item_id = f"passage-{passage.id}-{segment_index}"
        body = clamp_body(body)
        quote = derive_quote(body, passage.category, self._scorer)
        excerpt = compact_excerpt(body, self._config.excerpt_max_chars)

        return FeedItem(
            id=item_id,
            title=passage.title,
            quote=quote,
            body=body,
            category=passage.category,
            source=passage.source,
            url=None,
            like_seed=like_seed(item_id),
            share_text=build_share_text(
                quote=quote,
                excerpt=excerpt,
                title=passage.title,
                category=passage.category,
                source=passage.source,
                url=None,
                attribution=self._config.app_attribution,
            ),
            origin=ItemOrigin.PASSAGE,
            segment_index=segment_index,
            total_segments=total_segments,
            impact_score=impact,
        )

    def item_for_curated(self, story: CuratedStory) -> FeedItem:
        """Convert a curated editorial story into a feed item."""
        body = clamp_body(story.body)
        quote = normalize_quote(story.quote, QUOTE_MAX_CHARS)
        if len(quote) < QUOTE_MIN_CHARS:
            quote = derive_quote(body, story.category, self._scorer)
        excerpt = compact_excerpt(body, self._config.excerpt_max_chars)
        impact = self._scorer.score(body, story.category, TextUnit.SEGMENT).total

        return FeedItem(
            id=story.id,
            title=story.title,
            quote=quote,
            body=body,
            category=story.category,
            source=story.source,
            url=story.source_url,
            like_seed=like_seed(story.id),
            share_text=build_share_text(
                quote=quote,
                excerpt=excerpt,
                title=story.title,
                category=story.category,
                source=story.source,
                url=story.source_url,
                attribution=self._config.app_attribution,
            ),
            origin=ItemOrigin.CURATED,
            impact_score=impact,
        )


def _interleave(groups: Sequence[Sequence[FeedItem]]) -> Iterable[FeedItem]:
    """Yield items round-robin: first of every group, then second, ..."""
    depth = max((len(group) for group in groups), default=0)
    for offset in range(depth):
        for group in groups:
            if offset < len(group):
                yield group[offset]


def _deduplicate(items: Iterable[FeedItem]) -> list[FeedItem]:
    """Drop repeated ids and repeated quotes; first occurrence wins."""
    seen_ids: set[str] = set()
    seen_quotes: set[str] = set()
    unique: list[FeedItem] = []
    for item in items:
        fingerprint = text_fingerprint(item.quote)
        if item.id in seen_ids or fingerprint in seen_quotes:
            continue
        seen_ids.add(item.id)
        seen_quotes.add(fingerprint)
        unique.append(item)
    return unique


def build_seed_pool(
    config: PoolConfig | None = None,
    scorer: ImpactScorer | None = None,
) -> list[FeedItem]:
    """Build the seed pool from the packaged library and curated stories.

    Args:
        config: Pool configuration.
        scorer: Impact scorer.

    Returns:
        Seed pool for the feed session.
    """
    builder = PoolBuilder(config, scorer)
    return builder.build(default_library(), default_curated_stories())
