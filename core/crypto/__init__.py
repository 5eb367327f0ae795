"""
Core cryptographic utilities.

Provides the SHA-256 primitive and hex helpers used by the Merkle engine.
"""
from .hashing import (
    DIGEST_SIZE,
    sha256,
    hash_concat,
    to_hex,
    from_hex,
)

__all__ = [
    "DIGEST_SIZE",
    "sha256",
    "hash_concat",
    "to_hex",
    "from_hex",
]
