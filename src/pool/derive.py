"""Derivation of quotes, excerpts and bounded bodies from raw text."""

from src.config.constants import (
    BODY_MAX_CHARS,
    BODY_MIN_CHARS,
    QUOTE_MAX_CHARS,
    QUOTE_MIN_CHARS,
)
from src.library.models import PassageCategory
from src.ranker.impact import ImpactScorer
from src.text.sentences import (
    collapse_whitespace,
    cut_at_sentence_boundary,
    normalize_quote,
    split_sentences,
    truncate_at_word,
)


def derive_quote(
    text: str,
    category: PassageCategory | None,
    scorer: ImpactScorer,
) -> str:
    """Pick and normalize a pull quote for a body of text.

    Order of preference: the best-scoring sentence within quote bounds, the
    first sentence, then the whole text, each capped at QUOTE_MAX_CHARS.

    Args:
        text: Segment or section body.
        category: Category for the lexicon bonus.
        scorer: Impact scorer.

    Returns:
        Quote ending in terminal punctuation; shorter than QUOTE_MIN_CHARS
        only when ``text`` itself is.
    """
    best = scorer.best_sentence(text, category, QUOTE_MIN_CHARS, QUOTE_MAX_CHARS)
    if best is not None:
        return normalize_quote(best, QUOTE_MAX_CHARS)

    sentences = split_sentences(text)
    if sentences:
        first = normalize_quote(sentences[0], QUOTE_MAX_CHARS)
        if len(first) >= QUOTE_MIN_CHARS:
            return first

    return normalize_quote(collapse_whitespace(text), QUOTE_MAX_CHARS)


def clamp_body(text: str) -> str:
    """Bound a body to BODY_MAX_CHARS, preferring a sentence boundary.

    Args:
        text: Body text.

    Returns:
        ``text`` unchanged when short enough, else a sentence-bounded or
        word-bounded prefix.
    """
    stripped = text.strip()
    if len(stripped) <= BODY_MAX_CHARS:
        return stripped
    cut = cut_at_sentence_boundary(stripped, BODY_MIN_CHARS, BODY_MAX_CHARS)
    return cut if cut is not None else truncate_at_word(stripped, BODY_MAX_CHARS)
