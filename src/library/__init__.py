"""In-app passage library: models, categories and packaged content."""

from src.library.loader import (
    default_curated_stories,
    default_library,
    load_curated_stories,
    load_passages,
)
from src.library.models import (
    CuratedStory,
    Difficulty,
    Passage,
    PassageCategory,
    Question,
)


__all__ = [
    "CuratedStory",
    "Difficulty",
    "Passage",
    "PassageCategory",
    "Question",
    "default_curated_stories",
    "default_library",
    "load_curated_stories",
    "load_passages",
]
