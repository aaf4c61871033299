"""Sentence-level helpers: splitting, quote normalization, excerpts."""

import re


# Terminal punctuation (plus closing quotes or brackets) followed by a sentence
# that starts with an uppercase letter, digit or opening quote.
SENTENCE_BOUNDARY = re.compile(r"[.!?][\"'”’)\]]*(?=\s+[\"'“‘(\[]?[A-Z0-9])")

# End of a sentence inside running text, including trailing closers
SENTENCE_END = re.compile(r"[.!?][\"'”’)\]]*(?=\s|$)")

WHITESPACE = re.compile(r"\s+")

TERMINAL_PUNCTUATION = (".", "!", "?")
ELLIPSIS = "…"

_WRAPPING_QUOTES = "\"'“”‘’"
_TRAILING_SOFT_PUNCTUATION = ",;:-–— "


def collapse_whitespace(text: str) -> str:
    """Replace runs of whitespace (including newlines) with single spaces."""
    return WHITESPACE.sub(" ", text).strip()


def split_sentences(text: str) -> list[str]:
    """Split running text into sentences.

    Args:
        text: Text possibly spanning several paragraphs.

    Returns:
        Non-empty sentences with whitespace collapsed.
    """
    flat = collapse_whitespace(text)
    sentences: list[str] = []
    start = 0
    for match in SENTENCE_BOUNDARY.finditer(flat):
        sentences.append(flat[start : match.end()].strip())
        start = match.end()
    sentences.append(flat[start:].strip())
    return [s for s in sentences if s]


def word_count(text: str) -> int:
    """Count whitespace-separated words."""
    return len(text.split())


def truncate_at_word(text: str, max_chars: int, suffix: str = ELLIPSIS) -> str:
    """Truncate text at a word boundary, appending ``suffix`` when cut.

    Args:
        text: Text to shorten.
        max_chars: Maximum length of the result, suffix included.
        suffix: Marker appended when text was cut.

    Returns:
        Text no longer than ``max_chars``.
    """
    if len(text) <= max_chars:
        return text
    budget = max(max_chars - len(suffix), 0)
    cut = text[:budget]
    if " " in cut:
        cut = cut.rsplit(" ", 1)[0]
    return cut.rstrip(_TRAILING_SOFT_PUNCTUATION) + suffix


def normalize_quote(sentence: str, max_chars: int | None = None) -> str:
    """Normalize a sentence for display as a pull quote.

    Strips wrapping quotation marks and soft trailing punctuation, then
    guarantees terminal punctuation.

    Args:
        sentence: Raw sentence.
        max_chars: Optional length cap, applied at a word boundary.

    Returns:
        Quote ending in ``.``, ``!`` or ``?``; empty for blank input.
    """
    quote = collapse_whitespace(sentence).strip(_WRAPPING_QUOTES).strip()
    if not quote:
        return ""

    if max_chars is not None and len(quote) > max_chars:
        quote = truncate_at_word(quote, max_chars - 1, suffix="")

    quote = quote.rstrip(_TRAILING_SOFT_PUNCTUATION + _WRAPPING_QUOTES)
    if not quote.endswith(TERMINAL_PUNCTUATION):
        quote += "."
    return quote


def compact_excerpt(text: str, max_chars: int) -> str:
    """Build a multi-sentence excerpt within a character budget.

    Whole sentences are taken from the start of ``text`` while they fit. When
    even the first sentence is too long it is truncated at a word boundary.

    Args:
        text: Source text.
        max_chars: Maximum excerpt length.

    Returns:
        Single-line excerpt no longer than ``max_chars``.
    """
    sentences = split_sentences(text)
    if not sentences:
        return ""

    parts: list[str] = []
    length = 0
    for sentence in sentences:
        added = len(sentence) + (1 if parts else 0)
        if length + added > max_chars:
            break
        parts.append(sentence)
        length += added

    if not parts:
        return truncate_at_word(sentences[0], max_chars)
    return " ".join(parts)


def cut_at_sentence_boundary(text: str, min_chars: int, max_chars: int) -> str | None:
    """Cut text to the last sentence end that falls within bounds.

    Args:
        text: Text to cut.
        min_chars: Minimum acceptable length.
        max_chars: Maximum acceptable length.

    Returns:
        Prefix of ``text`` ending at a sentence boundary whose length lies in
        ``[min_chars, max_chars]``, or None when no such boundary exists.
    """
    best: int | None = None
    for match in SENTENCE_END.finditer(text):
        end = match.end()
        if end > max_chars:
            break
        if end >= min_chars:
            best = end
    if best is None:
        return None
    return text[:best].rstrip()


def ends_with_sentence(text: str) -> bool:
    """Whether text ends with terminal punctuation (closers allowed)."""
    return text.rstrip().rstrip(_WRAPPING_QUOTES + ")]").endswith(TERMINAL_PUNCTUATION)
