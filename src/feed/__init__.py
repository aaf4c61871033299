"""Feed serving: items, pool merging and session metrics.

``FeedSession`` and ``FeedController`` live in ``src.feed.session`` and
``src.feed.controller``; they depend on the store package, which itself
depends on the models here.
"""

from src.feed.merge import merge_pools
from src.feed.metrics import FeedMetrics
from src.feed.models import CachedStory, FeedItem, ItemOrigin, RenderItem


__all__ = [
    "CachedStory",
    "FeedItem",
    "FeedMetrics",
    "ItemOrigin",
    "RenderItem",
    "merge_pools",
]
