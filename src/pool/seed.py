"""Deterministic seeds and fingerprints for feed items."""

import hashlib
import re

from src.config.constants import LIKE_SEED_BASE, LIKE_SEED_SPAN


POLYNOMIAL_BASE = 31
POLYNOMIAL_MODULUS = 2**32

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def polynomial_hash(
    text: str,
    base: int = POLYNOMIAL_BASE,
    modulus: int = POLYNOMIAL_MODULUS,
) -> int:
    """Rolling polynomial hash of a string.

    ``h = (h * base + ord(ch)) mod modulus`` over the characters of ``text``.
    Unlike the builtin ``hash`` it is stable across processes.

    Args:
        text: Input string.
        base: Polynomial base.
        modulus: Result modulus.

    Returns:
        Hash value in ``[0, modulus)``.
    """
    value = 0
    for char in text:
        value = (value * base + ord(char)) % modulus
    return value


def like_seed(item_id: str) -> int:
    """Deterministic cosmetic like count for an item.

    Args:
        item_id: Stable item identifier.

    Returns:
        Integer in ``[LIKE_SEED_BASE, LIKE_SEED_BASE + LIKE_SEED_SPAN)``.
    """
    return LIKE_SEED_BASE + polynomial_hash(item_id) % LIKE_SEED_SPAN


def format_like_count(value: int) -> str:
    """Render a like count compactly: ``950``, ``1.2K``, ``3M``.

    Args:
        value: Like count.

    Returns:
        Display string.
    """
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M".replace(".0M", "M")
    if value >= 1_000:
        return f"{value / 1_000:.1f}K".replace(".0K", "K")
    return str(value)


def text_fingerprint(text: str) -> str:
    """Fingerprint text for near-duplicate detection.

    Case, punctuation and whitespace differences do not change the result.

    Args:
        text: Quote or body text.

    Returns:
        First 16 hex characters of a SHA-256 digest.
    """
    normalized = _NON_ALNUM.sub(" ", text.lower()).strip()
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:16]
