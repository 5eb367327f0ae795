"""
Proof Document Model

Serializable form of an inclusion proof: the leaf, its position, the tree
width, the expected root and the ordered sibling steps. Written to disk as
canonical JSON so that the same proof always produces identical bytes.
"""

from __future__ import annotations

import json
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from core.crypto.hashing import from_hex, to_hex
from core.merkle.merkle_proofs import InclusionProof, Orientation, ProofStep
from core.schemas.canonical import dumps_canonical
from core.schemas.errors import SchemaValidationException
from core.schemas.public_values import to_fixed_root
from core.schemas.versioning import SCHEMA_VERSION, assert_supported_schema_version


# 0x followed by 64 hex chars = 32 bytes
HEX_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")
HEX_BYTES_PATTERN = re.compile(r"^0x(?:[0-9a-fA-F]{2})*$")


def validate_hex_hash(value: str, field_name: str) -> str:
    """Validate that a value is a 32-byte hex hash with 0x prefix."""
    if not HEX_HASH_PATTERN.match(value):
        raise ValueError(
            f"{field_name} must be a 32-byte hex string with 0x prefix (64 hex chars)"
        )
    return value.lower()


def validate_hex_bytes(value: str, field_name: str) -> str:
    """Validate that a value is 0x-prefixed hex of any even length."""
    if not HEX_BYTES_PATTERN.match(value):
        raise ValueError(f"{field_name} must be 0x-prefixed hex with an even number of digits")
    return value.lower()


class ProofStepModel(BaseModel):
    """One serialized proof step."""

    model_config = ConfigDict(extra="forbid")

    sibling: str = Field(..., description="Sibling digest (0x-prefixed hex)")
    is_right: bool = Field(
        ...,
        description="True when the accumulated value is hashed on the left of the sibling",
    )

    @field_validator("sibling")
    @classmethod
    def validate_sibling(cls, v: str) -> str:
        return validate_hex_bytes(v, "sibling")

    def to_step(self) -> ProofStep:
        return ProofStep(
            sibling=from_hex(self.sibling),
            orientation=Orientation.from_flag(self.is_right),
        )


class ProofDocument(BaseModel):
    """
    Self-contained inclusion proof.

    Carries the tree shape (leaf_index, leaf_count) so a verifier can
    reproduce odd-tail duplication without the tree.
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default=SCHEMA_VERSION)
    leaf: str = Field(..., description="Raw leaf bytes (0x-prefixed hex)")
    leaf_index: int = Field(..., ge=0)
    leaf_count: int = Field(..., ge=1)
    root: str = Field(..., description="Expected Merkle root (0x-prefixed, 32 bytes)")
    steps: list[ProofStepModel] = Field(default_factory=list)

    @field_validator("schema_version")
    @classmethod
    def validate_schema_version(cls, v: str) -> str:
        assert_supported_schema_version(v)
        return v

    @field_validator("leaf")
    @classmethod
    def validate_leaf(cls, v: str) -> str:
        return validate_hex_bytes(v, "leaf")

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: str) -> str:
        return validate_hex_hash(v, "root")

    @model_validator(mode="after")
    def validate_index_in_range(self) -> "ProofDocument":
        if self.leaf_index >= self.leaf_count:
            raise ValueError(
                f"leaf_index {self.leaf_index} out of range for {self.leaf_count} leaves"
            )
        return self

    @classmethod
    def from_proof(cls, leaf: bytes, proof: InclusionProof, root: bytes) -> "ProofDocument":
        """
        Package a generated proof.

        Raises:
            MalformedRootException: If ``root`` is not 32 bytes (a single
                leaf tree over a raw leaf of another width)
        """
        root = to_fixed_root(root)
        return cls(
            leaf=to_hex(leaf),
            leaf_index=proof.leaf_index,
            leaf_count=proof.leaf_count,
            root=to_hex(root),
            steps=[
                ProofStepModel(sibling=to_hex(step.sibling), is_right=step.orientation.is_right)
                for step in proof.steps
            ],
        )

    def to_inclusion_proof(self) -> InclusionProof:
        return InclusionProof(
            leaf_index=self.leaf_index,
            leaf_count=self.leaf_count,
            steps=tuple(step.to_step() for step in self.steps),
        )

    @property
    def leaf_bytes(self) -> bytes:
        return from_hex(self.leaf)

    @property
    def root_bytes(self) -> bytes:
        return from_hex(self.root)

    def to_json(self) -> str:
        return dumps_canonical(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProofDocument":
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise SchemaValidationException(
                f"Invalid proof document: {e.error_count()} validation error(s)",
                details={"errors": [err["msg"] for err in e.errors()]},
            ) from e

    @classmethod
    def from_json(cls, text: str) -> "ProofDocument":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SchemaValidationException(f"Proof document is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise SchemaValidationException("Proof document must be a JSON object")
        return cls.from_dict(data)
