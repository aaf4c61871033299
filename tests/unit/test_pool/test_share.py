"""Unit tests for share text assembly."""

from src.library.models import PassageCategory
from src.pool.share import build_share_text


class TestBuildShareText:
    """Tests for build_share_text."""

    def test_full_layout(self) -> None:
        """Test the complete share text layout."""
        text = build_share_text(
            quote="Knowledge is power.",
            excerpt="Knowledge is power. It grows with use.",
            title="Essays",
            category=PassageCategory.PHILOSOPHY,
            source="Francis Bacon",
            url="https://example.org/essays",
            attribution="Shared from Readtounlock",
        )

        assert text == (
            "“Knowledge is power.”\n\n"
            "Knowledge is power. It grows with use.\n\n"
            "From: Essays • Philosophy\n"
            "Francis Bacon\n"
            "https://example.org/essays\n"
            "Shared from Readtounlock"
        )

    def test_excerpt_equal_to_quote_omitted(self) -> None:
        """Test that an excerpt repeating the quote is skipped."""
        text = build_share_text(
            quote="Knowledge is power.",
            excerpt="Knowledge is power.",
            title="Essays",
            category=PassageCategory.PHILOSOPHY,
            source="",
            url=None,
            attribution="Shared from Readtounlock",
        )

        assert text == (
            "“Knowledge is power.”\n\n"
            "From: Essays • Philosophy\n"
            "Shared from Readtounlock"
        )
