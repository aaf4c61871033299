"""Data models for the in-app passage library."""

from enum import Enum
from typing import Annotated

from pydantic import Field, model_validator

from src.data_model import StrictBaseModel


class PassageCategory(str, Enum):
    """Topical category shared by passages and feed items.

    Values are the display names; they are also what the story cache
    persists, so renaming a member is a cache-format change.
    """

    SCIENCE = "Science"
    HISTORY = "History"
    PHILOSOPHY = "Philosophy"
    ECONOMICS = "Economics"
    PSYCHOLOGY = "Psychology"
    LITERATURE = "Literature"
    MATHEMATICS = "Mathematics"
    TECHNOLOGY = "Technology"

    @classmethod
    def from_name(
        cls, name: str, default: "PassageCategory | None" = None
    ) -> "PassageCategory":
        """Resolve a category from its display name or member name.

        Args:
            name: Display name ("Science") or member name ("SCIENCE").
            default: Returned for unknown names; Literature when omitted.

        Returns:
            Matching category, or the default.
        """
        cleaned = name.strip()
        for category in cls:
            if cleaned.lower() in (category.value.lower(), category.name.lower()):
                return category
        return default or cls.LITERATURE


class Difficulty(str, Enum):
    """Reading difficulty of a passage."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class Question(StrictBaseModel):
    """Multiple-choice comprehension question."""

    id: int
    text: Annotated[str, Field(min_length=1)]
    options: Annotated[list[str], Field(min_length=2)]
    correct_index: Annotated[int, Field(ge=0)]

    @model_validator(mode="after")
    def validate_correct_index(self) -> "Question":
        """Ensure the correct answer points at an existing option."""
        if self.correct_index >= len(self.options):
            msg = (
                f"correct_index {self.correct_index} out of range "
                f"for {len(self.options)} options"
            )
            raise ValueError(msg)
        return self


class Passage(StrictBaseModel):
    """A static reading passage from the in-app library.

    Attributes:
        id: Stable numeric identifier.
        category: Topical category.
        title: Passage title.
        subtitle: One-line teaser.
        content: Body text, paragraphs separated by blank lines.
        read_time_minutes: Estimated read time.
        difficulty: Reading difficulty.
        questions: Ordered quiz questions.
        source: Public-domain attribution.
    """

    id: Annotated[int, Field(ge=0)]
    category: PassageCategory
    title: Annotated[str, Field(min_length=1)]
    subtitle: str = ""
    content: Annotated[str, Field(min_length=1)]
    read_time_minutes: Annotated[int, Field(ge=1)] = 3
    difficulty: Difficulty = Difficulty.MEDIUM
    questions: list[Question] = Field(default_factory=list)
    source: str = ""

    @property
    def read_time_label(self) -> str:
        """Short read-time label, e.g. ``"4 min"``."""
        return f"{self.read_time_minutes} min"


class CuratedStory(StrictBaseModel):
    """Editorial story shipped alongside the passage library."""

    id: Annotated[str, Field(min_length=1)]
    title: Annotated[str, Field(min_length=1)]
    quote: Annotated[str, Field(min_length=1)]
    body: Annotated[str, Field(min_length=1)]
    category: PassageCategory
    source: str = ""
    source_url: str | None = None
