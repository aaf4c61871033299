"""Unit tests for remote and local pool merging."""

from src.feed.merge import merge_pools
from src.feed.models import ItemOrigin
from tests.helpers.fixtures import make_item


def remote_items(count: int) -> list:
    return [make_item(f"gutenberg-{i}-1", origin=ItemOrigin.REMOTE) for i in range(count)]


class TestMergePools:
    """Tests for merge_pools."""

    def test_enough_remote_replaces_local(self) -> None:
        """Test that a large remote set drops the local pool."""
        remote = remote_items(24)
        local = [make_item("passage-1-1")]

        assert merge_pools(remote, local, replace_threshold=24) == remote

    def test_few_remote_padded_with_local(self) -> None:
        """Test that a small remote set leads and local items follow."""
        remote = remote_items(2)
        local = [make_item("passage-1-1"), make_item("passage-2-1")]

        merged = merge_pools(remote, local, replace_threshold=24)

        assert [item.id for item in merged] == [
            "gutenberg-0-1",
            "gutenberg-1-1",
            "passage-1-1",
            "passage-2-1",
        ]

    def test_local_duplicates_skipped(self) -> None:
        """Test that local items already present are not repeated."""
        shared = make_item("curated-x")
        merged = merge_pools([shared], [shared, make_item("passage-1-1")])

        assert [item.id for item in merged] == ["curated-x", "passage-1-1"]

    def test_max_size(self) -> None:
        """Test the optional size cap."""
        merged = merge_pools(remote_items(3), [make_item("p")], max_size=2)

        assert len(merged) == 2

    def test_empty_remote_is_local(self) -> None:
        """Test that no remote items yields the local pool."""
        local = [make_item("passage-1-1")]

        assert merge_pools([], local) == local
