"""Unit tests for sentence helpers."""

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


class TestSplitSentences:
    """Tests for split_sentences."""

    def test_basic_split(self) -> None:
        """Test splitting on terminal punctuation."""
        text = "The sky was grey. Was it going to rain? Nobody knew!"

        assert split_sentences(text) == [
            "The sky was grey.",
            "Was it going to rain?",
            "Nobody knew!",
        ]

    def test_keeps_closing_quotes(self) -> None:
        """Test that closing quotes stay with their sentence."""
        text = '"Stay here." She left anyway.'

        assert split_sentences(text) == ['"Stay here."', "She left anyway."]

    def test_does_not_split_before_lowercase(self) -> None:
        """Test that abbreviations followed by lowercase do not split."""
        text = "It cost approx. ten dollars. Then it rose."

        assert split_sentences(text) == [
            "It cost approx. ten dollars.",
            "Then it rose.",
        ]

    def test_spans_line_breaks(self) -> None:
        """Test that wrapped lines are joined."""
        assert split_sentences("One line\ncontinues here. Next.") == [
            "One line continues here.",
            "Next.",
        ]


class TestQuoteHelpers:
    """Tests for quote normalization and truncation."""

    def test_normalize_strips_wrapping_quotes(self) -> None:
        """Test that wrapping quotes are removed."""
        assert normalize_quote("“Knowledge is power.”") == "Knowledge is power."

    def test_normalize_adds_terminal_punctuation(self) -> None:
        """Test that a missing period is added."""
        assert normalize_quote("Knowledge is power;") == "Knowledge is power."

    def test_normalize_caps_length(self) -> None:
        """Test that long quotes are cut at a word and stay within the cap."""
        quote = normalize_quote("word " * 100, max_chars=50)

        assert len(quote) <= 50
        assert quote.endswith(".")

    def test_normalize_blank(self) -> None:
        """Test that blank input stays blank."""
        assert normalize_quote("   ") == ""

    def test_truncate_at_word(self) -> None:
        """Test truncation at a word boundary with an ellipsis."""
        assert truncate_at_word("alpha beta gamma delta", 14) == "alpha beta…"

    def test_truncate_short_text_unchanged(self) -> None:
        """Test that short text is not modified."""
        assert truncate_at_word("short", 14) == "short"

    def test_collapse_and_count(self) -> None:
        """Test whitespace collapse and word count."""
        assert collapse_whitespace("  a\n\tb   c ") == "a b c"
        assert word_count("one two  three") == 3


class TestExcerptAndCut:
    """Tests for excerpts and sentence-bounded cuts."""

    def test_compact_excerpt_takes_whole_sentences(self) -> None:
        """Test that the excerpt stops before a sentence that does not fit."""
        text = "First sentence here. Second sentence here. Third one."

        assert compact_excerpt(text, 45) == "First sentence here. Second sentence here."

    def test_compact_excerpt_truncates_long_first_sentence(self) -> None:
        """Test that an overlong first sentence is truncated."""
        excerpt = compact_excerpt("word " * 50 + "end.", 30)

        assert len(excerpt) <= 30
        assert excerpt.endswith("…")

    def test_cut_at_sentence_boundary(self) -> None:
        """Test cutting at the last sentence end within bounds."""
        text = "Aaaa aaaa. Bbbb bbbb. Cccc cccc. Dddd dddd."

        assert cut_at_sentence_boundary(text, 15, 35) == "Aaaa aaaa. Bbbb bbbb. Cccc cccc."

    def test_cut_returns_none_when_no_boundary_fits(self) -> None:
        """Test that None is returned when no sentence end lies in bounds."""
        assert cut_at_sentence_boundary("no punctuation at all here", 5, 20) is None

    def test_ends_with_sentence(self) -> None:
        """Test terminal punctuation detection with closers."""
        assert ends_with_sentence("He said “go.”")
        assert ends_with_sentence("Really?)")
        assert not ends_with_sentence("Trailing comma,")
