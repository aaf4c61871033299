"""Data models for impact scoring."""

from dataclasses import dataclass
from enum import Enum


class TextUnit(str, Enum):
    """Granularity of the text being scored; selects the length sweet spot."""

    SENTENCE = "sentence"
    PARAGRAPH = "paragraph"
    SEGMENT = "segment"


@dataclass(frozen=True)
class ImpactScore:
    """Breakdown of an impact score.

    Attributes:
        length_score: Word-count sweet-spot bonus.
        punctuation_score: Question mark and semicolon bonus (capped).
        impact_score: Impact-lexicon bonus (capped).
        category_score: Category-lexicon bonus (capped).
        total: Sum of components clamped to [0.0, 1.0].
    """

    length_score: float
    punctuation_score: float
    impact_score: float
    category_score: float
    total: float

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary for logging."""
        return {
            "length_score": self.length_score,
            "punctuation_score": self.punctuation_score,
            "impact_score": self.impact_score,
            "category_score": self.category_score,
            "total": self.total,
        }


@dataclass(frozen=True)
class ScoredText:
    """A text unit with its position and score, used for ranking."""

    index: int
    text: str
    score: ImpactScore

    @property
    def total(self) -> float:
        """Shortcut for the total score."""
        return self.score.total
