"""Constants for the remote book fetcher."""

import re

from src.library.models import PassageCategory


GUTENBERG_EBOOK_URL = "https://www.gutenberg.org/ebooks/{book_id}"

# Query sent with every catalog page request
CATALOG_QUERY: dict[str, str] = {
    "languages": "en",
    "mime_type": "text/plain",
    "sort": "popular",
}

# Plain-text formats in preference order
PLAIN_TEXT_MIME_TYPES: tuple[str, ...] = (
    "text/plain; charset=utf-8",
    "text/plain; charset=us-ascii",
    "text/plain",
)

# Category inference: first keyword hit in priority order wins.
CATEGORY_KEYWORD_PRIORITY: tuple[tuple[PassageCategory, tuple[str, ...]], ...] = (
    (PassageCategory.MATHEMATICS, ("mathemat", "geometry", "algebra", "arithmetic", "calculus")),
    (PassageCategory.TECHNOLOGY, ("technology", "engineering", "invention", "machinery", "electric")),
    (PassageCategory.SCIENCE, ("science", "physics", "chemistry", "biology", "astronomy", "natural history", "evolution")),
    (PassageCategory.ECONOMICS, ("economic", "political economy", "wealth", "commerce", "finance", "money")),
    (PassageCategory.PSYCHOLOGY, ("psychology", "mind", "conduct of life", "self-help", "behavior")),
    (PassageCategory.PHILOSOPHY, ("philosophy", "ethics", "metaphysics", "stoic", "logic", "religion")),
    (PassageCategory.HISTORY, ("history", "biography", "war", "civilization", "antiquities", "politics")),
    (PassageCategory.LITERATURE, ("fiction", "literature", "poetry", "drama", "essays", "novel")),
)

DEFAULT_REMOTE_CATEGORY = PassageCategory.LITERATURE

# Boilerplate markers around the book body
START_MARKER_PATTERN = re.compile(
    r"^.*\*\*\*\s*START OF (?:THE|THIS) PROJECT GUTENBERG E-?BOOK.*$",
    re.IGNORECASE | re.MULTILINE,
)
END_MARKER_PATTERN = re.compile(
    r"^.*(?:\*\*\*\s*END OF (?:THE|THIS) PROJECT GUTENBERG E-?BOOK"
    r"|END OF (?:THE )?PROJECT GUTENBERG'?S? E-?BOOK).*$",
    re.IGNORECASE | re.MULTILINE,
)

# Paragraph lines that look like structure rather than prose
HEADING_PATTERN = re.compile(
    r"^(?i:chapter|book|part|section|volume|canto|act|scene|letter)\s+(?:[IVXLCDM]+|\d+)\b"
)

# Sampling floor when no paragraph passes the validity filter
FALLBACK_PARAGRAPH_MIN_CHARS = 80

# Minimum index distance between selected paragraphs
MIN_PARAGRAPH_GAP = 2

MAX_TITLE_CHARS = 120
