"""
Schemas
File: public_values.py

Purpose: The fixed-width output record handed to an external attestation
backend, and its binary encoding.

Encoding: Solidity ABI encoding of the static struct

    struct MerkleTreeValues {
        uint32 leaf_count;
        uint32 verification_index;
        bytes32 root;
        bool verification_result;
        uint64 hash_operations;
    }

i.e. five 32-byte big-endian words, integers and bool left-padded with
zeros, bytes32 verbatim. 160 bytes total.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.crypto.hashing import DIGEST_SIZE, from_hex, to_hex

from .errors import MalformedRootException, SchemaValidationException

UINT32_MAX: int = 2**32 - 1
UINT64_MAX: int = 2**64 - 1

WORD_SIZE: int = 32
PUBLIC_VALUES_SIZE: int = 5 * WORD_SIZE


def to_fixed_root(root: bytes) -> bytes:
    """
    Return ``root`` as a fixed 32-byte value.

    Raises:
        MalformedRootException: If the root is not exactly 32 bytes. The
            root is never padded, truncated or replaced by zeros.
    """
    if len(root) != DIGEST_SIZE:
        raise MalformedRootException(actual_length=len(root), expected_length=DIGEST_SIZE)
    return bytes(root)


class PublicValues(BaseModel):
    """Outputs of one program run, ready to be encoded and attested."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    leaf_count: int = Field(..., ge=0, le=UINT32_MAX, description="Number of leaves (uint32)")
    verification_index: int = Field(
        ..., ge=0, le=UINT32_MAX, description="Index of the verified leaf (uint32)"
    )
    root: bytes = Field(..., description="32-byte Merkle root")
    verification_result: bool = Field(..., description="Whether the proof matched the root")
    hash_operations: int = Field(
        ..., ge=0, le=UINT64_MAX, description="Build plus verify hash operations (uint64)"
    )

    @field_validator("root", mode="before")
    @classmethod
    def _fixed_width_root(cls, value: Any) -> bytes:
        if isinstance(value, str):
            value = from_hex(value)
        return to_fixed_root(value)

    def encode(self) -> bytes:
        return encode_public_values(self)

    @classmethod
    def decode(cls, data: bytes) -> "PublicValues":
        return decode_public_values(data)

    def to_display_dict(self) -> dict[str, Any]:
        """JSON-friendly view with the root as 0x hex."""
        return {
            "leaf_count": self.leaf_count,
            "verification_index": self.verification_index,
            "root": to_hex(self.root),
            "verification_result": self.verification_result,
            "hash_operations": self.hash_operations,
        }


def _word(value: int) -> bytes:
    return value.to_bytes(WORD_SIZE, "big")


def _read_uint(word: bytes, bits: int, field_path: str) -> int:
    value = int.from_bytes(word, "big")
    if value >> bits:
        raise SchemaValidationException(
            f"{field_path} does not fit in uint{bits}",
            field_path=field_path,
        )
    return value


def encode_public_values(values: PublicValues) -> bytes:
    """Encode ``values`` as 160 bytes of ABI words."""
    return b"".join([
        _word(values.leaf_count),
        _word(values.verification_index),
        to_fixed_root(values.root),
        _word(1 if values.verification_result else 0),
        _word(values.hash_operations),
    ])


def decode_public_values(data: bytes) -> PublicValues:
    """
    Decode 160 bytes of ABI words back into PublicValues.

    Raises:
        SchemaValidationException: On wrong length, non-zero padding or a
            bool word other than 0/1.
    """
    if len(data) != PUBLIC_VALUES_SIZE:
        raise SchemaValidationException(
            f"Public values must be {PUBLIC_VALUES_SIZE} bytes, got {len(data)}",
            details={"length": len(data)},
        )

    words = [data[i:i + WORD_SIZE] for i in range(0, PUBLIC_VALUES_SIZE, WORD_SIZE)]

    flag = _read_uint(words[3], 8, "verification_result")
    if flag not in (0, 1):
        raise SchemaValidationException(
            f"verification_result must be 0 or 1, got {flag}",
            field_path="verification_result",
        )

    return PublicValues(
        leaf_count=_read_uint(words[0], 32, "leaf_count"),
        verification_index=_read_uint(words[1], 32, "verification_index"),
        root=words[2],
        verification_result=bool(flag),
        hash_operations=_read_uint(words[4], 64, "hash_operations"),
    )
