"""Keyword lexicon matching with pre-compiled patterns."""

import re


# Keywords this short are prone to substring false positives
# (e.g. "war" in "toward"), so they get \b guards.
_SHORT_KEYWORD_THRESHOLD = 4

_WORD_CHARS_ONLY = re.compile(r"^\w+$")


def compile_keyword_pattern(keyword: str) -> re.Pattern[str]:
    """Compile a keyword into a case-insensitive regex pattern.

    Short all-word-character keywords get word-boundary anchors. Longer
    keywords match as a word prefix so inflections count ("discover" matches
    "discovery" and "discovered").

    Args:
        keyword: Raw keyword.

    Returns:
        Compiled regex pattern.
    """
    escaped = re.escape(keyword)
    if len(keyword) <= _SHORT_KEYWORD_THRESHOLD and _WORD_CHARS_ONLY.match(keyword):
        return re.compile(rf"\b{escaped}\b", re.IGNORECASE)
    return re.compile(rf"\b{escaped}", re.IGNORECASE)


class LexiconMatcher:
    """Counts keyword occurrences from a fixed lexicon.

    Patterns are compiled once; instances are immutable and safe to share
    between threads.
    """

    def __init__(self, keywords: tuple[str, ...] | list[str]) -> None:
        """Initialize the matcher.

        Args:
            keywords: Lexicon entries; duplicates are ignored.
        """
        unique = list(dict.fromkeys(k.strip().lower() for k in keywords if k.strip()))
        self._patterns: tuple[re.Pattern[str], ...] = tuple(
            compile_keyword_pattern(keyword) for keyword in unique
        )

    def count_hits(self, text: str) -> int:
        """Count every keyword occurrence in ``text``.

        Repeated occurrences count separately; callers cap the resulting
        bonus.
        """
        return sum(len(pattern.findall(text)) for pattern in self._patterns)
