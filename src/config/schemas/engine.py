"""Tunable configuration for scoring, pool building, remote fetch and feed."""

from typing import Annotated

from pydantic import Field, model_validator

from src.config.constants import (
    BODY_MIN_CHARS,
    DEFAULT_APP_ATTRIBUTION,
    DEFAULT_BLOCKED_TERMS,
    DEFAULT_CATALOG_URL,
    MIN_PARAGRAPH_CHARS,
    POOL_SEGMENT_TARGET_CHARS,
)
from src.data_model import StrictBaseModel
from src.fetch.config import FetchConfig


class ImpactConfig(StrictBaseModel):
    """Weights and caps of the additive impact score.

    Attributes:
        length_bonus: Bonus for a word count inside the sweet spot.
        punctuation_hit_weight: Bonus per question mark or semicolon.
        punctuation_cap: Maximum punctuation contribution.
        impact_hit_weight: Bonus per impact-lexicon hit.
        impact_cap: Maximum impact-lexicon contribution.
        category_hit_weight: Bonus per category-lexicon hit.
        category_cap: Maximum category-lexicon contribution.
    """

    length_bonus: Annotated[float, Field(ge=0.0, le=1.0)] = 0.25
    punctuation_hit_weight: Annotated[float, Field(ge=0.0, le=1.0)] = 0.05
    punctuation_cap: Annotated[float, Field(ge=0.0, le=1.0)] = 0.15
    impact_hit_weight: Annotated[float, Field(ge=0.0, le=1.0)] = 0.07
    impact_cap: Annotated[float, Field(ge=0.0, le=1.0)] = 0.35
    category_hit_weight: Annotated[float, Field(ge=0.0, le=1.0)] = 0.06
    category_cap: Annotated[float, Field(ge=0.0, le=1.0)] = 0.25


class PoolConfig(StrictBaseModel):
    """Local seed pool construction settings."""

    segment_target_chars: Annotated[int, Field(ge=200, le=4000)] = (
        POOL_SEGMENT_TARGET_CHARS
    )
    min_paragraph_chars: Annotated[int, Field(ge=BODY_MIN_CHARS, le=500)] = (
        MIN_PARAGRAPH_CHARS
    )
    keep_threshold: Annotated[float, Field(ge=0.0, le=1.0)] = 0.30
    fallback_top_n: Annotated[int, Field(ge=1, le=20)] = 2
    excerpt_max_chars: Annotated[int, Field(ge=80, le=1200)] = 420
    app_attribution: Annotated[str, Field(min_length=1)] = DEFAULT_APP_ATTRIBUTION


class RemoteConfig(StrictBaseModel):
    """Remote catalog paging, filtering and extraction settings."""

    catalog_url: Annotated[str, Field(pattern=r"^https?://")] = DEFAULT_CATALOG_URL
    max_pages: Annotated[int, Field(ge=1, le=20)] = 3
    max_books: Annotated[int, Field(ge=1, le=100)] = 12
    max_workers: Annotated[int, Field(ge=1, le=32)] = 4
    paragraphs_per_book: Annotated[int, Field(ge=1, le=20)] = 3
    paragraph_min_chars: Annotated[int, Field(ge=40, le=2000)] = 160
    paragraph_max_chars: Annotated[int, Field(ge=100, le=5000)] = 1400
    section_min_chars: Annotated[int, Field(ge=100, le=5000)] = 700
    section_max_chars: Annotated[int, Field(ge=200, le=8000)] = 1150
    max_uppercase_ratio: Annotated[float, Field(ge=0.0, le=1.0)] = 0.30
    max_digit_ratio: Annotated[float, Field(ge=0.0, le=1.0)] = 0.06
    max_stories: Annotated[int, Field(ge=1, le=1000)] = 60
    blocked_terms: frozenset[str] = DEFAULT_BLOCKED_TERMS

    @model_validator(mode="after")
    def validate_bounds(self) -> "RemoteConfig":
        """Ensure min/max pairs are ordered."""
        if self.section_min_chars >= self.section_max_chars:
            msg = "section_min_chars must be below section_max_chars"
            raise ValueError(msg)
        if self.paragraph_min_chars >= self.paragraph_max_chars:
            msg = "paragraph_min_chars must be below paragraph_max_chars"
            raise ValueError(msg)
        return self


class FeedConfig(StrictBaseModel):
    """Feed session serving settings.

    Attributes:
        batch_size: Items appended per batch.
        prefetch_threshold: Distance from the end that triggers a batch.
        initial_batches: Batches appended on boot.
        max_pool_size: Cap on the active pool before shuffling.
        remote_replace_threshold: Remote item count at which remote
            results replace the local pool instead of being padded by it.
    """

    batch_size: Annotated[int, Field(ge=1, le=500)] = 24
    prefetch_threshold: Annotated[int, Field(ge=0, le=500)] = 8
    initial_batches: Annotated[int, Field(ge=0, le=10)] = 2
    max_pool_size: Annotated[int, Field(ge=1, le=10000)] = 400
    remote_replace_threshold: Annotated[int, Field(ge=0, le=10000)] = 24


class FeedEngineConfig(StrictBaseModel):
    """Complete configuration bundle for the feed engine."""

    impact: ImpactConfig = Field(default_factory=ImpactConfig)
    pool: PoolConfig = Field(default_factory=PoolConfig)
    remote: RemoteConfig = Field(default_factory=RemoteConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
