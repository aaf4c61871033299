"""Heuristic impact scoring for sentences, paragraphs and segments."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog

from src.config.constants import COMPONENT_RANKER, QUOTE_MAX_CHARS, QUOTE_MIN_CHARS
from src.config.schemas import ImpactConfig
from src.library.models import PassageCategory
from src.ranker.constants import (
    CATEGORY_LEXICONS,
    IMPACT_LEXICON,
    PUNCTUATION_MARKS,
    WORD_COUNT_SWEET_SPOTS,
)
from src.ranker.lexicon import LexiconMatcher
from src.ranker.models import ImpactScore, ScoredText, TextUnit
from src.text.sentences import split_sentences, word_count


logger = structlog.get_logger()


class ImpactScorer:
    """Scores text units for quotability and topical relevance.

    Scoring formula:
        total = clamp(length + punctuation + impact + category, 0.0, 1.0)

    Where:
        - length: full bonus inside the unit's word-count sweet spot,
          proportional below it, decaying linearly to zero at twice the
          upper bound
        - punctuation: per question mark or semicolon, capped
        - impact: per impact-lexicon occurrence, capped
        - category: per category-lexicon occurrence, capped

    The score is a pure function of (text, category, unit).
    """

    def __init__(self, config: ImpactConfig | None = None) -> None:
        """Initialize the scorer.

        Args:
            config: Weights and caps; defaults when omitted.
        """
        self._config = config or ImpactConfig()
        self._impact_matcher = LexiconMatcher(IMPACT_LEXICON)
        self._category_matchers = {
            category: LexiconMatcher(keywords)
            for category, keywords in CATEGORY_LEXICONS.items()
        }
        self._log = logger.bind(component=COMPONENT_RANKER, subcomponent="impact")

    @property
    def config(self) -> ImpactConfig:
        """Scoring configuration."""
        return self._config

    def score(
        self,
        text: str,
        category: PassageCategory | None = None,
        unit: TextUnit = TextUnit.PARAGRAPH,
    ) -> ImpactScore:
        """Compute the impact score of a single text unit.

        Args:
            text: Text to score.
            category: Optional category whose lexicon adds a bonus.
            unit: Granularity of ``text``.

        Returns:
            ImpactScore with components and a total in [0.0, 1.0].
        """
        length_score = self._compute_length_score(text, unit)
        punctuation_score = self._compute_punctuation_score(text)
        impact_score = self._compute_impact_score(text)
        category_score = self._compute_category_score(text, category)

        total = length_score + punctuation_score + impact_score + category_score
        total = min(max(total, 0.0), 1.0)

        return ImpactScore(
            length_score=length_score,
            punctuation_score=punctuation_score,
            impact_score=impact_score,
            category_score=category_score,
            total=total,
        )

    def rank(
        self,
        texts: Sequence[str],
        category: PassageCategory | None = None,
        unit: TextUnit = TextUnit.PARAGRAPH,
    ) -> list[ScoredText]:
        """Score texts and order them best first.

        Ties keep document order, so the ranking is stable.

        Args:
            texts: Text units in document order.
            category: Optional category for the lexicon bonus.
            unit: Granularity of the texts.

        Returns:
            ScoredText entries sorted by total descending, index ascending.
        """
        scored = [
            ScoredText(index=i, text=text, score=self.score(text, category, unit))
            for i, text in enumerate(texts)
        ]
        return sorted(scored, key=lambda s: (-s.total, s.index))

    def best_sentence(
        self,
        text: str,
        category: PassageCategory | None = None,
        min_chars: int = QUOTE_MIN_CHARS,
        max_chars: int = QUOTE_MAX_CHARS,
    ) -> str | None:
        """Pick the most quotable sentence within length bounds.

        Args:
            text: Segment or section to search.
            category: Optional category for the lexicon bonus.
            min_chars: Shortest acceptable sentence.
            max_chars: Longest acceptable sentence.

        Returns:
            Highest-scoring sentence (first one on ties), or None when no
            sentence fits the bounds.
        """
        candidates = [
            s for s in split_sentences(text) if min_chars <= len(s) <= max_chars
        ]
        if not candidates:
            return None
        ranked = self.rank(candidates, category, TextUnit.SENTENCE)
        return ranked[0].text

    def select_top(
        self,
        scored: Iterable[ScoredText],
        threshold: float,
        fallback_top_n: int,
    ) -> list[ScoredText]:
        """Keep entries at or above ``threshold``, in document order.

        When nothing passes, the best ``fallback_top_n`` entries are kept
        instead so a document never contributes zero units.

        Args:
            scored: Scored units (any order).
            threshold: Minimum total to keep.
            fallback_top_n: Number kept when none pass.

        Returns:
            Kept entries sorted by index.
        """
        entries = list(scored)
        kept = [s for s in entries if s.total >= threshold]
        if not kept:
            ranked = sorted(entries, key=lambda s: (-s.total, s.index))
            kept = ranked[:fallback_top_n]
            self._log.debug(
                "threshold_fallback",
                candidates=len(entries),
                threshold=threshold,
                kept=len(kept),
            )
        return sorted(kept, key=lambda s: s.index)

    def _compute_length_score(self, text: str, unit: TextUnit) -> float:
        """Compute the word-count sweet-spot bonus.

        Args:
            text: Text to score.
            unit: Granularity selecting the sweet spot.

        Returns:
            Length component in [0.0, length_bonus].
        """
        words = word_count(text)
        if words == 0:
            return 0.0

        low, high = WORD_COUNT_SWEET_SPOTS[unit]
        bonus = self._config.length_bonus

        if words < low:
            return bonus * words / low
        if words <= high:
            return bonus
        overflow = (words - high) / high
        return bonus * max(0.0, 1.0 - overflow)

    def _compute_punctuation_score(self, text: str) -> float:
        """Compute the punctuation-density bonus (capped)."""
        hits = sum(text.count(mark) for mark in PUNCTUATION_MARKS)
        raw = hits * self._config.punctuation_hit_weight
        return min(raw, self._config.punctuation_cap)

    def _compute_impact_score(self, text: str) -> float:
        """Compute the impact-lexicon bonus (capped)."""
        raw = self._impact_matcher.count_hits(text) * self._config.impact_hit_weight
        return min(raw, self._config.impact_cap)

    def _compute_category_score(
        self, text: str, category: PassageCategory | None
    ) -> float:
        """Compute the category-lexicon bonus (capped)."""
        if category is None:
            return 0.0
        matcher = self._category_matchers.get(category)
        if matcher is None:
            return 0.0
        raw = matcher.count_hits(text) * self._config.category_hit_weight
        return min(raw, self._config.category_cap)
