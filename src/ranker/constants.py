"""Lexicons and sweet spots for the impact scorer."""

from src.library.models import PassageCategory
from src.ranker.models import TextUnit


# Words that tend to mark a quotable, emotionally or intellectually charged line
IMPACT_LEXICON: tuple[str, ...] = (
    "never",
    "always",
    "truth",
    "power",
    "freedom",
    "courage",
    "fear",
    "hope",
    "love",
    "mind",
    "secret",
    "discover",
    "remember",
    "must",
    "change",
    "life",
    "death",
    "world",
    "future",
    "wisdom",
    "knowledge",
    "habit",
    "attention",
    "imagine",
    "believe",
    "learn",
    "greatest",
    "nothing",
    "everything",
    "strength",
    "suffer",
    "happiness",
)

CATEGORY_LEXICONS: dict[PassageCategory, tuple[str, ...]] = {
    PassageCategory.SCIENCE: (
        "evolution", "species", "experiment", "evidence", "nature", "theory",
        "survival", "energy", "universe", "observation", "variation",
    ),
    PassageCategory.HISTORY: (
        "empire", "war", "century", "king", "library", "civilization",
        "revolution", "ancient", "memory", "scholar", "city",
    ),
    PassageCategory.PHILOSOPHY: (
        "virtue", "reason", "judgment", "soul", "tranquility", "opinion",
        "desire", "fortune", "stoic", "good", "power",
    ),
    PassageCategory.ECONOMICS: (
        "labor", "market", "wealth", "trade", "price", "money", "capital",
        "specialization", "commerce", "credit", "value",
    ),
    PassageCategory.PSYCHOLOGY: (
        "attention", "habit", "consciousness", "thought", "memory", "emotion",
        "character", "behavior", "feeling", "mind", "perception",
    ),
    PassageCategory.LITERATURE: (
        "book", "read", "author", "word", "story", "poet", "library",
        "voice", "language", "novel", "fiction",
    ),
    PassageCategory.MATHEMATICS: (
        "prime", "proof", "number", "infinite", "theorem", "pattern",
        "geometry", "equation", "contradiction", "finite", "problem",
    ),
    PassageCategory.TECHNOLOGY: (
        "machine", "engine", "invention", "program", "computer", "device",
        "design", "engineering", "technology", "create", "execute",
    ),
}

# Characters that signal tension or turn of thought in a line
PUNCTUATION_MARKS: tuple[str, ...] = ("?", ";")

# Word-count window that earns the full length bonus, per unit
WORD_COUNT_SWEET_SPOTS: dict[TextUnit, tuple[int, int]] = {
    TextUnit.SENTENCE: (8, 32),
    TextUnit.PARAGRAPH: (45, 160),
    TextUnit.SEGMENT: (90, 260),
}
