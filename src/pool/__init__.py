"""Local seed pool: segmentation, scoring and card derivation."""

from src.pool.builder import PoolBuilder, PoolBuildSummary, build_seed_pool
from src.pool.derive import clamp_body, derive_quote
from src.pool.seed import format_like_count, like_seed, polynomial_hash, text_fingerprint
from src.pool.share import build_share_text


__all__ = [
    "PoolBuildSummary",
    "PoolBuilder",
    "build_seed_pool",
    "build_share_text",
    "clamp_body",
    "derive_quote",
    "format_like_count",
    "like_seed",
    "polynomial_hash",
    "text_fingerprint",
]
