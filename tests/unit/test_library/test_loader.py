"""Unit tests for the passage library loader."""

from pathlib import Path

import pytest

from src.config.errors import ConfigValidationError
from src.library.loader import (
    default_curated_stories,
    default_library,
    load_curated_stories,
    load_passages,
)
from src.library.models import PassageCategory


class TestPackagedLibrary:
    """Tests for the packaged data files."""

    def test_passages_load(self) -> None:
        """Test that the packaged library validates."""
        passages = default_library()

        assert len(passages) >= 8
        assert len({p.id for p in passages}) == len(passages)
        assert all(p.content.strip() for p in passages)

    def test_every_category_covered(self) -> None:
        """Test that each category has at least one passage."""
        categories = {p.category for p in default_library()}

        assert categories == set(PassageCategory)

    def test_curated_load(self) -> None:
        """Test that curated stories validate and use curated ids."""
        stories = default_curated_stories()

        assert stories
        assert all(story.id.startswith("curated-") for story in stories)


class TestLoadFromPath:
    """Tests for loading explicit files."""

    def test_load_custom_file(self, tmp_path: Path) -> None:
        """Test loading passages from a file."""
        path = tmp_path / "passages.yaml"
        path.write_text(
            "passages:\n"
            "  - id: 1\n"
            "    category: Mathematics\n"
            "    title: Primes\n"
            "    content: There are infinitely many primes.\n"
        )

        passages = load_passages(path)

        assert passages[0].category == PassageCategory.MATHEMATICS
        assert passages[0].read_time_label == "3 min"

    def test_duplicate_ids_rejected(self, tmp_path: Path) -> None:
        """Test that duplicate passage ids are rejected."""
        entry = "  - id: 1\n    category: Science\n    title: T\n    content: C\n"
        path = tmp_path / "passages.yaml"
        path.write_text("passages:\n" + entry + entry)

        with pytest.raises(ConfigValidationError):
            load_passages(path)

    def test_bad_question_index_rejected(self, tmp_path: Path) -> None:
        """Test that a correct_index past the options is rejected."""
        path = tmp_path / "passages.yaml"
        path.write_text(
            "passages:\n"
            "  - id: 1\n"
            "    category: Science\n"
            "    title: T\n"
            "    content: C\n"
            "    questions:\n"
            "      - id: 1\n"
            "        text: Q?\n"
            "        options: [a, b]\n"
            "        correct_index: 2\n"
        )

        with pytest.raises(ConfigValidationError) as exc_info:
            load_passages(path)

        assert "passages.0.questions.0" in exc_info.value.errors[0]["location"]

    def test_empty_curated_file(self, tmp_path: Path) -> None:
        """Test that an empty curated file yields no stories."""
        path = tmp_path / "curated.yaml"
        path.write_text("")

        assert load_curated_stories(path) == ()
