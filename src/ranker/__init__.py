"""Impact ranking for passages, paragraphs and sentences.

This module provides the deterministic, lexicon-based impact score used to
pick pull quotes, choose which segments and paragraphs to feature, and order
remote stories before deduplication.
"""

from src.ranker.impact import ImpactScorer
from src.ranker.lexicon import LexiconMatcher
from src.ranker.models import ImpactScore, ScoredText, TextUnit


__all__ = [
    "ImpactScore",
    "ImpactScorer",
    "LexiconMatcher",
    "ScoredText",
    "TextUnit",
]
