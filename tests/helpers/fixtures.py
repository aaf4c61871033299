"""Deterministic feed items, passages and book texts for tests."""

import json
from typing import Any

from src.feed.models import FeedItem, ItemOrigin
from src.fetch.models import FetchError, FetchErrorClass, FetchResult
from src.library.models import Passage, PassageCategory
from src.pool.seed import like_seed


CATEGORIES = list(PassageCategory)

PROSE_SENTENCES = [
    "The river had carried the town's hopes for three generations, and nobody "
    "remembered a spring when it failed them.",
    "Why should a farmer trust the sky when the market has already decided the "
    "price of his patience?",
    "Every lesson the old tutor gave began with a question; every answer she "
    "accepted ended with another.",
    "The letters were kept in a tin box under the stairs, tied with string and "
    "sorted by the year they arrived.",
    "Knowledge, she liked to say, is a habit of attention rather than a pile of "
    "facts collected for display.",
    "When the mill closed, the village learned how much of its life had been "
    "measured by the sound of the wheel.",
]


def make_item(
    item_id: str,
    category: PassageCategory = PassageCategory.SCIENCE,
    impact: float = 0.5,
    origin: ItemOrigin = ItemOrigin.PASSAGE,
) -> FeedItem:
    """Build a valid feed item with text derived from its id."""
    return FeedItem(
        id=item_id,
        title=f"Title {item_id}",
        quote=f"A memorable line from item {item_id}.",
        body=f"Body text for item {item_id}. " + PROSE_SENTENCES[0],
        category=category,
        source="Test Source",
        like_seed=like_seed(item_id),
        share_text=f"Share {item_id}",
        origin=origin,
        impact_score=impact,
    )


def make_pool(size: int = 50) -> list[FeedItem]:
    """Pool of ``size`` items spread round-robin over all categories."""
    return [
        make_item(f"item-{i}", CATEGORIES[i % len(CATEGORIES)]) for i in range(size)
    ]


def make_paragraph(seed: int, sentences: int = 3, tag: str = "") -> str:
    """A prose paragraph built from rotating sentences.

    A non-empty ``tag`` prepends a unique, highly quotable sentence so
    paragraphs from different sources never share their best quote.
    """
    body = [
        PROSE_SENTENCES[(seed + k) % len(PROSE_SENTENCES)] for k in range(sentences)
    ]
    if tag:
        body.insert(
            0, f"In note {tag} the truth is that courage and hope never fail the reader."
        )
    return " ".join(body)


def make_passage(
    passage_id: int,
    category: PassageCategory = PassageCategory.HISTORY,
    paragraphs: int = 5,
) -> Passage:
    """A passage of several prose paragraphs."""
    content = "\n\n".join(
        make_paragraph(passage_id + i, tag=f"{passage_id}-{i}") for i in range(paragraphs)
    )
    return Passage(
        id=passage_id,
        category=category,
        title=f"Passage {passage_id}",
        content=content,
        source="Test Library",
    )


def _wrap(paragraph: str, width: int = 70) -> str:
    """Hard-wrap a paragraph like a plain-text ebook."""
    lines: list[str] = []
    current = ""
    for word in paragraph.split():
        if current and len(current) + 1 + len(word) > width:
            lines.append(current)
            current = word
        else:
            current = f"{current} {word}".strip()
    lines.append(current)
    return "\n".join(lines)


def make_gutenberg_text(paragraphs: int = 12, title: str = "A Test Book") -> str:
    """Plain-text ebook with license header, chapters, prose and footer."""
    body: list[str] = []
    for i in range(paragraphs):
        if i % 4 == 0:
            body.append(f"CHAPTER {i // 4 + 1}")
        body.append(_wrap(make_paragraph(i, sentences=3, tag=f"{title}-{i}")))

    return "\n\n".join(
        [
            f"The Project Gutenberg eBook of {title}",
            "This eBook is for the use of anyone anywhere at no cost.",
            f"*** START OF THE PROJECT GUTENBERG EBOOK {title.upper()} ***",
            *body,
            f"*** END OF THE PROJECT GUTENBERG EBOOK {title.upper()} ***",
            "Section 1. General Terms of Use and Redistributing Project "
            "Gutenberg electronic works.",
        ]
    )


def book_payload(  # noqa: PLR0913
    book_id: int,
    title: str = "A Test Book",
    subjects: list[str] | None = None,
    bookshelves: list[str] | None = None,
    download_count: int = 100,
    formats: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Catalog entry in the remote API's JSON shape."""
    return {
        "id": book_id,
        "title": title,
        "authors": [{"name": "Author, Test", "birth_year": 1800, "death_year": 1870}],
        "subjects": subjects or ["Fiction"],
        "bookshelves": bookshelves or [],
        "languages": ["en"],
        "copyright": False,
        "media_type": "Text",
        "formats": formats
        if formats is not None
        else {
            "text/plain; charset=us-ascii": f"https://example.org/{book_id}.txt",
            "application/zip": f"https://example.org/{book_id}.zip",
        },
        "download_count": download_count,
    }


def catalog_payload(
    books: list[dict[str, Any]], next_url: str | None = None
) -> dict[str, Any]:
    """One catalog page in the remote API's JSON shape."""
    return {"count": len(books), "next": next_url, "previous": None, "results": books}


def ok_result(url: str, body: bytes | str | dict[str, Any]) -> FetchResult:
    """Successful fetch result; dicts are encoded as JSON."""
    if isinstance(body, dict):
        body = json.dumps(body)
    if isinstance(body, str):
        body = body.encode("utf-8")
    return FetchResult(status_code=200, final_url=url, body_bytes=body)


def failed_result(
    url: str,
    error_class: FetchErrorClass = FetchErrorClass.CONNECTION_ERROR,
    status_code: int = 0,
) -> FetchResult:
    """Failed fetch result of the given class."""
    return FetchResult(
        status_code=status_code,
        final_url=url,
        error=FetchError(
            error_class=error_class,
            message=f"{error_class.value} for {url}",
            status_code=status_code or None,
        ),
    )
