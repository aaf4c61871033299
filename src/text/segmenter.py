"""Paragraph-bounded segmentation of long-form text."""

import re

from src.config.constants import MIN_PARAGRAPH_CHARS, POOL_SEGMENT_TARGET_CHARS


PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n")

# Separator inserted between packed paragraphs
SEGMENT_JOIN = "\n\n"


def split_paragraphs(text: str, min_chars: int = MIN_PARAGRAPH_CHARS) -> list[str]:
    """Split text on blank lines and drop short noise paragraphs.

    Args:
        text: Raw text; CRLF line endings are accepted.
        min_chars: Paragraphs of this length or shorter are discarded.

    Returns:
        Trimmed paragraphs in original order.
    """
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    paragraphs = (p.strip() for p in PARAGRAPH_BREAK.split(normalized))
    return [p for p in paragraphs if len(p) > min_chars]


def pack_paragraphs(paragraphs: list[str], target_chars: int) -> list[str]:
    """Greedily pack consecutive paragraphs into segments.

    A new segment starts when appending the next paragraph, plus the join,
    would push a non-empty segment past ``target_chars``. A single paragraph
    longer than the target becomes a segment on its own.

    Args:
        paragraphs: Non-empty paragraphs in order.
        target_chars: Character budget per segment.

    Returns:
        Segments joined with blank lines.
    """
    segments: list[str] = []
    current: list[str] = []
    current_count = 0

    for paragraph in paragraphs:
        next_count = current_count + len(paragraph) + (len(SEGMENT_JOIN) if current else 0)
        if current and next_count > target_chars:
            segments.append(SEGMENT_JOIN.join(current))
            current = [paragraph]
            current_count = len(paragraph)
        else:
            current.append(paragraph)
            current_count = next_count

    if current:
        segments.append(SEGMENT_JOIN.join(current))

    return segments


def split_into_segments(
    text: str,
    target_chars: int = POOL_SEGMENT_TARGET_CHARS,
    min_paragraph_chars: int = MIN_PARAGRAPH_CHARS,
) -> list[str]:
    """Split long-form text into readable, paragraph-bounded segments.

    Args:
        text: Body text with blank-line paragraph breaks.
        target_chars: Character budget per segment.
        min_paragraph_chars: Noise filter applied before packing.

    Returns:
        Segments in document order; empty when no paragraph survives the
        noise filter.
    """
    return pack_paragraphs(split_paragraphs(text, min_paragraph_chars), target_chars)
