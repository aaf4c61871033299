"""Text processing: paragraph segmentation and sentence utilities."""

from src.text.segmenter import (
    pack_paragraphs,
    split_into_segments,
    split_paragraphs,
)
from src.text.sentences import (
    collapse_whitespace,
    compact_excerpt,
    cut_at_sentence_boundary,
    ends_with_sentence,
    normalize_quote,
    split_sentences,
    truncate_at_word,
    word_count,
)


__all__ = [
    "collapse_whitespace",
    "compact_excerpt",
    "cut_at_sentence_boundary",
    "ends_with_sentence",
    "normalize_quote",
    "pack_paragraphs",
    "split_into_segments",
    "split_paragraphs",
    "split_sentences",
    "truncate_at_word",
    "word_count",
]
