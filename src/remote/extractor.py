"""Story extraction from raw public-domain book text."""

import re

import structlog

from src.config.constants import COMPONENT_REMOTE
from src.config.schemas import PoolConfig, RemoteConfig
from src.feed.models import FeedItem, ItemOrigin
from src.library.models import PassageCategory
from src.pool.derive import derive_quote
from src.pool.seed import like_seed
from src.pool.share import build_share_text
from src.ranker.impact import ImpactScorer
from src.ranker.lexicon import compile_keyword_pattern
from src.ranker.models import TextUnit
from src.remote.constants import (
    CATEGORY_KEYWORD_PRIORITY,
    DEFAULT_REMOTE_CATEGORY,
    END_MARKER_PATTERN,
    FALLBACK_PARAGRAPH_MIN_CHARS,
    GUTENBERG_EBOOK_URL,
    HEADING_PATTERN,
    MAX_TITLE_CHARS,
    MIN_PARAGRAPH_GAP,
    START_MARKER_PATTERN,
)
from src.remote.models import RemoteBook
from src.text.sentences import (
    collapse_whitespace,
    cut_at_sentence_boundary,
    compact_excerpt,
    ends_with_sentence,
    truncate_at_word,
)


logger = structlog.get_logger()

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_NOISE_MARKERS = ("[illustration", "gutenberg", "[footnote", "transcriber")
_CATEGORY_PATTERNS = tuple(
    (category, tuple(compile_keyword_pattern(keyword) for keyword in keywords))
    for category, keywords in CATEGORY_KEYWORD_PRIORITY
)


def strip_boilerplate(raw_text: str) -> str:
    """Remove the license header and footer around a book body.

    Everything up to and including the START marker line and everything
    from the END marker line on is dropped. Text without markers is returned
    unchanged apart from newline normalization.

    Args:
        raw_text: Full downloaded text.

    Returns:
        Book body without either marker.
    """
    text = raw_text.replace("\r\n", "\n").replace("\r", "\n")

    start = START_MARKER_PATTERN.search(text)
    if start is not None:
        text = text[start.end() :]

    end = END_MARKER_PATTERN.search(text)
    if end is not None:
        text = text[: end.start()]

    return text.strip()


def unwrap_paragraphs(text: str) -> list[str]:
    """Split on blank lines and join hard-wrapped lines within a paragraph."""
    paragraphs = (collapse_whitespace(block) for block in _PARAGRAPH_BREAK.split(text))
    return [p for p in paragraphs if p]


def infer_category(book: RemoteBook) -> PassageCategory:
    """Map subjects and bookshelves to a category.

    Categories are tried in priority order; the first one with a keyword
    starting a word in any subject or bookshelf wins ("evolution" does not
    match "Revolution").

    Args:
        book: Catalog entry.

    Returns:
        Inferred category, Literature when nothing matches.
    """
    terms = (*book.subjects, *book.bookshelves)
    for category, patterns in _CATEGORY_PATTERNS:
        if any(pattern.search(term) for term in terms for pattern in patterns):
            return category
    return DEFAULT_REMOTE_CATEGORY


def clean_title(title: str) -> str:
    """Shorten a catalog title for a card header.

    Subtitles after ``;`` or a line break are dropped.
    """
    head = re.split(r"[;\n]", title, maxsplit=1)[0]
    head = collapse_whitespace(head).rstrip(" :,")
    return truncate_at_word(head or "Untitled", MAX_TITLE_CHARS)


def _is_noise(paragraph: str) -> bool:
    lowered = paragraph.lower()
    return any(marker in lowered for marker in _NOISE_MARKERS)


def _is_heading(paragraph: str) -> bool:
    letters = [c for c in paragraph if c.isalpha()]
    if letters and all(c.isupper() for c in letters):
        return True
    return HEADING_PATTERN.match(paragraph) is not None


class TextExtractor:
    """Turns a book's raw text into a few quotable feed items.

    Pipeline: strip boilerplate, unwrap paragraphs, filter prose-like
    paragraphs, pick the best non-adjacent ones by impact score, expand each
    into a sentence-bounded section and derive a card from it. Books with no
    valid paragraph fall back to evenly spaced sampling.
    """

    def __init__(
        self,
        config: RemoteConfig | None = None,
        pool_config: PoolConfig | None = None,
        scorer: ImpactScorer | None = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            config: Remote extraction bounds.
            pool_config: Excerpt length and share attribution.
            scorer: Impact scorer.
        """
        self._config = config or RemoteConfig()
        self._pool_config = pool_config or PoolConfig()
        self._scorer = scorer or ImpactScorer()
        self._log = logger.bind(component=COMPONENT_REMOTE, subcomponent="extractor")

    def is_valid_paragraph(self, paragraph: str) -> bool:
        """Whether a paragraph is prose suitable for selection.

        Rejects paragraphs outside the length bounds, headings, lines without
        terminal punctuation, shouting or tabular text and license or
        illustration noise.
        """
        length = len(paragraph)
        bounds = (self._config.paragraph_min_chars, self._config.paragraph_max_chars)
        if not bounds[0] <= length <= bounds[1]:
            return False
        if _is_noise(paragraph) or _is_heading(paragraph):
            return False
        if not ends_with_sentence(paragraph):
            return False

        letters = [c for c in paragraph if c.isalpha()]
        if not letters:
            return False
        upper_ratio = sum(1 for c in letters if c.isupper()) / len(letters)
        if upper_ratio > self._config.max_uppercase_ratio:
            return False

        digit_ratio = sum(1 for c in paragraph if c.isdigit()) / length
        return digit_ratio <= self._config.max_digit_ratio

    def select_paragraphs(
        self,
        paragraphs: list[str],
        category: PassageCategory | None = None,
    ) -> list[int]:
        """Pick the best valid paragraphs that are not adjacent.

        Args:
            paragraphs: All paragraphs of the book, in order.
            category: Category for the lexicon bonus.

        Returns:
            Paragraph indices in score order, pairwise at least
            MIN_PARAGRAPH_GAP apart; empty when nothing is valid.
        """
        valid = [i for i, p in enumerate(paragraphs) if self.is_valid_paragraph(p)]
        ranked = self._scorer.rank(
            [paragraphs[i] for i in valid], category, TextUnit.PARAGRAPH
        )

        chosen: list[int] = []
        for entry in ranked:
            index = valid[entry.index]
            if all(abs(index - other) >= MIN_PARAGRAPH_GAP for other in chosen):
                chosen.append(index)
            if len(chosen) == self._config.paragraphs_per_book:
                break
        return chosen

    def sample_evenly(self, paragraphs: list[str]) -> list[int]:
        """Evenly spaced paragraph indices for books with no valid paragraph.

        Only non-noise paragraphs of at least FALLBACK_PARAGRAPH_MIN_CHARS
        are sampled.
        """
        pool = [
            i
            for i, p in enumerate(paragraphs)
            if len(p) >= FALLBACK_PARAGRAPH_MIN_CHARS and not _is_noise(p)
        ]
        count = self._config.paragraphs_per_book
        if len(pool) <= count:
            return pool
        return [pool[int((k + 0.5) * len(pool) / count)] for k in range(count)]

    def expand_section(self, paragraphs: list[str], start: int) -> str | None:
        """Grow a section from ``paragraphs[start]`` and cut it to bounds.

        Following paragraphs are appended until the minimum length is
        reached; expansion stops at headings and noise. The section is then
        cut at the last sentence end within bounds.

        Returns:
            Section of ``[section_min_chars, section_max_chars]`` characters
            ending at a sentence boundary, or None if the bounds cannot be met.
        """
        minimum = self._config.section_min_chars
        maximum = self._config.section_max_chars

        parts = [paragraphs[start]]
        length = len(parts[0])
        index = start + 1
        while length < minimum and index < len(paragraphs):
            candidate = paragraphs[index]
            if _is_noise(candidate) or _is_heading(candidate):
                break
            parts.append(candidate)
            length += len(candidate) + 2
            index += 1

        section = "\n\n".join(parts)
        if len(section) < minimum:
            return None
        return cut_at_sentence_boundary(section, minimum, maximum)

    def extract(self, book: RemoteBook, raw_text: str) -> list[FeedItem]:
        """Extract feed items from one book.

        Args:
            book: Catalog entry.
            raw_text: Downloaded plain text.

        Returns:
            Feed items in paragraph score order; empty when nothing usable
            was found.
        """
        log = self._log.bind(book_id=book.id)
        category = infer_category(book)
        paragraphs = unwrap_paragraphs(strip_boilerplate(raw_text))

        indices = self.select_paragraphs(paragraphs, category)
        strategy = "ranked"
        if not indices:
            indices = self.sample_evenly(paragraphs)
            strategy = "even_sampling"

        sections: list[str] = []
        for index in indices:
            section = self.expand_section(paragraphs, index)
            if section is not None and section not in sections:
                sections.append(section)

        items = [
            self._make_item(book, category, section, part, len(sections))
            for part, section in enumerate(sections, start=1)
        ]
        log.debug(
            "book_extracted",
            paragraphs=len(paragraphs),
            strategy=strategy,
            selected=len(indices),
            items=len(items),
            category=category.value,
        )
        return items

    def _make_item(  # noqa: PLR0913
        self,
        book: RemoteBook,
        category: PassageCategory,
        section: str,
        part: int,
        total: int,
    ) -> FeedItem:
        """Derive a feed item from a sentence-bounded section."""
        quote = derive_quote(section, category, self._scorer)

        item_id = f"gutenberg-{book.id}-{part}"
        title = clean_title(book.title)
        source = (
            f"{book.author_names}, Project Gutenberg"
            if book.author_names
            else "Project Gutenberg"
        )
        url = GUTENBERG_EBOOK_URL.format(book_id=book.id)
        excerpt = compact_excerpt(section, self._pool_config.excerpt_max_chars)

        return FeedItem(
            id=item_id,
            title=title,
            quote=quote,
            body=section,
            category=category,
            source=source,
            url=url,
            like_seed=like_seed(item_id),
            share_text=build_share_text(
                quote=quote,
                excerpt=excerpt,
                title=title,
                category=category,
                source=source,
                url=url,
                attribution=self._pool_config.app_attribution,
            ),
            origin=ItemOrigin.REMOTE,
            segment_index=part,
            total_segments=total,
            impact_score=self._scorer.score(section, category, TextUnit.SEGMENT).total,
        )
