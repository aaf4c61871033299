"""Merging remote stories with the local seed pool."""

from collections.abc import Sequence

from src.feed.models import FeedItem


def merge_pools(
    remote: Sequence[FeedItem],
    local: Sequence[FeedItem],
    replace_threshold: int = 24,
    max_size: int | None = None,
) -> list[FeedItem]:
    """Build the master pool from remote and local items.

    When the remote side yields at least ``replace_threshold`` items it
    replaces the local pool entirely. Otherwise the remote items come first,
    padded with local items whose id is not already present.

    Args:
        remote: Stories from the remote fetcher (or its fallback).
        local: Local seed pool.
        replace_threshold: Remote count at which local items are dropped.
        max_size: Optional cap on the merged pool.

    Returns:
        Merged pool, remote items first.
    """
    if len(remote) >= replace_threshold:
        merged = list(remote)
    else:
        present = {item.id for item in remote}
        merged = list(remote) + [item for item in local if item.id not in present]

    if max_size is not None:
        merged = merged[:max_size]
    return merged
