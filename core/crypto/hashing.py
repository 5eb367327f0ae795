"""
Hashing Utilities
Hash primitive shared by the tree builder, proof generator and verifier.

This module provides:
- SHA-256 hashing for raw bytes
- Pair hashing over the concatenation of two byte strings
- Hex encoding/decoding with 0x prefix

Determinism Notes:
- Bytes are hashed exactly as given, never re-encoded
- Pair hashing is sha256(left + right), NOT sha256(sha256(left) + sha256(right))
"""
from __future__ import annotations

import hashlib

# Width of every internal node digest
DIGEST_SIZE: int = 32


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hash_concat(left: bytes, right: bytes) -> bytes:
    """
    Hash the concatenation of two byte sequences.

    This is the single hash operation of the engine: parent = sha256(left + right).
    Inputs may be of any length (level 0 leaves are not required to be digests).

    Args:
        left: Left operand
        right: Right operand

    Returns:
        32-byte SHA-256 digest of concatenation
    """
    hasher = hashlib.sha256()
    hasher.update(left)
    hasher.update(right)
    return hasher.digest()


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "DIGEST_SIZE",
    "sha256",
    "hash_concat",
    "to_hex",
    "from_hex",
]
