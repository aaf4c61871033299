"""Data models for feed items, cached stories and rendered cards."""

from dataclasses import dataclass
from enum import Enum
from typing import Annotated

from pydantic import Field

from src.config.constants import (
    BODY_MAX_CHARS,
    BODY_MIN_CHARS,
    QUOTE_MAX_CHARS,
    QUOTE_MIN_CHARS,
)
from src.data_model import StrictBaseModel
from src.library.models import PassageCategory


class ItemOrigin(str, Enum):
    """Where a feed item came from."""

    CURATED = "curated"
    PASSAGE = "passage"
    REMOTE = "remote"


class FeedItem(StrictBaseModel):
    """A card in the swipeable feed.

    Body and quote lengths are bounded so every card renders without
    degenerate or overflowing text.

    Attributes:
        id: Stable identifier (also the like-set key).
        title: Card title.
        quote: Short pull quote ending in terminal punctuation.
        body: Segment of a passage or section of a remote book.
        category: Topical category.
        source: Attribution line.
        url: Optional external link.
        like_seed: Deterministic base like count.
        share_text: Pre-rendered text for the share sheet.
        origin: Curated, passage-derived or remote.
        segment_index: 1-based part number within the source document.
        total_segments: Number of parts drawn from the source document.
        impact_score: Impact score of the body.
    """

    id: Annotated[str, Field(min_length=1)]
    title: Annotated[str, Field(min_length=1)]
    quote: Annotated[str, Field(min_length=QUOTE_MIN_CHARS, max_length=QUOTE_MAX_CHARS)]
    body: Annotated[str, Field(min_length=BODY_MIN_CHARS, max_length=BODY_MAX_CHARS)]
    category: PassageCategory
    source: str = ""
    url: str | None = None
    like_seed: Annotated[int, Field(ge=0)] = 0
    share_text: str = ""
    origin: ItemOrigin = ItemOrigin.PASSAGE
    segment_index: Annotated[int, Field(ge=1)] = 1
    total_segments: Annotated[int, Field(ge=1)] = 1
    impact_score: Annotated[float, Field(ge=0.0, le=1.0)] = 0.0

    @property
    def part_label(self) -> str:
        """Label such as ``"Part 2/5"``."""
        return f"Part {self.segment_index}/{self.total_segments}"


class CachedStory(StrictBaseModel):
    """Serialized form of a remote FeedItem in the story cache.

    The category is stored by display name rather than as the enum so that
    renamed or removed categories degrade to Literature instead of breaking
    the whole cache.
    """

    id: str
    title: str
    quote: str
    body: str
    category: str
    source: str = ""
    url: str | None = None
    like_seed: int = 0
    share_text: str = ""
    segment_index: int = 1
    total_segments: int = 1
    impact_score: float = 0.0

    @classmethod
    def from_feed_item(cls, item: FeedItem) -> "CachedStory":
        """Serialize a feed item for the cache."""
        return cls(
            id=item.id,
            title=item.title,
            quote=item.quote,
            body=item.body,
            category=item.category.value,
            source=item.source,
            url=item.url,
            like_seed=item.like_seed,
            share_text=item.share_text,
            segment_index=item.segment_index,
            total_segments=item.total_segments,
            impact_score=item.impact_score,
        )

    def to_feed_item(self) -> FeedItem:
        """Rebuild the feed item without re-fetching.

        Raises:
            pydantic.ValidationError: If the record violates FeedItem bounds.
        """
        return FeedItem(
            id=self.id,
            title=self.title,
            quote=self.quote,
            body=self.body,
            category=PassageCategory.from_name(self.category),
            source=self.source,
            url=self.url,
            like_seed=self.like_seed,
            share_text=self.share_text,
            origin=ItemOrigin.REMOTE,
            segment_index=self.segment_index,
            total_segments=self.total_segments,
            impact_score=self.impact_score,
        )


@dataclass(frozen=True)
class RenderItem:
    """A feed item placed at a position in the rendered list.

    The same FeedItem can appear several times in an infinite feed; the
    position keeps each occurrence distinct.
    """

    position: int
    item: FeedItem
