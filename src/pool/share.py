"""Share-sheet text assembly."""

from src.library.models import PassageCategory


def build_share_text(  # noqa: PLR0913
    quote: str,
    excerpt: str,
    title: str,
    category: PassageCategory,
    source: str,
    url: str | None,
    attribution: str,
) -> str:
    """Assemble the text handed to the system share sheet.

    Layout::

        "<quote>"

        <excerpt>

        From: <title> • <category>
        <source>
        <url>
        <attribution>

    The excerpt is omitted when it merely repeats the quote; empty source or
    URL lines are skipped.

    Returns:
        Multi-line share text.
    """
    blocks = [f"“{quote}”"]
    if excerpt and excerpt.strip() != quote.strip():
        blocks.append(excerpt)

    footer = [f"From: {title} • {category.value}"]
    if source:
        footer.append(source)
    if url:
        footer.append(url)
    footer.append(attribution)
    blocks.append("\n".join(footer))

    return "\n\n".join(blocks)
