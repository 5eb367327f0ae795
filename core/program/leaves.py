"""
Leaf Derivation

Deterministic leaves for program runs: leaf i = sha256(UTF-8(prefix + str(i))).
"""
from __future__ import annotations

from core.config.runtime import DEFAULT_LEAF_PREFIX
from core.crypto.hashing import sha256


def derive_leaf(index: int, prefix: str = DEFAULT_LEAF_PREFIX) -> bytes:
    """
    Derive the leaf at ``index``.

    Example:
        >>> derive_leaf(0) == sha256(b"Leaf data 0")
        True
    """
    return sha256(f"{prefix}{index}".encode("utf-8"))


def derive_leaves(count: int, prefix: str = DEFAULT_LEAF_PREFIX) -> list[bytes]:
    """Derive leaves 0..count-1 in order."""
    if count < 0:
        raise ValueError(f"Leaf count must be non-negative, got {count}")
    return [derive_leaf(i, prefix) for i in range(count)]


__all__ = [
    "derive_leaf",
    "derive_leaves",
]
