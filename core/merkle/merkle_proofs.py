"""
Merkle Proofs
Inclusion proof generation and verification, plus thin class-based wrappers.

Orientation contract between generator and verifier:
- SIBLING_ON_RIGHT (wire flag is_right=True): the proven node sat at an even
  index, its sibling at index + 1. The accumulated value is the LEFT operand:
  parent = sha256(current + sibling)
- SIBLING_ON_LEFT (wire flag is_right=False): the proven node sat at an odd
  index, its sibling at index - 1. parent = sha256(sibling + current)

Self-paired levels (odd tail) contribute no proof step. A proof that
carries its tree shape (leaf_index, leaf_count) lets the verifier
reproduce the duplication itself.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Sequence, Union

from core.merkle.merkle_tree import (
    MerkleTree,
    Pairing,
    build_merkle_tree,
    merkle_parent,
    pairing_for,
)
from core.schemas.errors import IndexOutOfRangeException, MerkleVerificationException


logger = logging.getLogger(__name__)


class Orientation(str, Enum):
    """Side on which a proof step's sibling is hashed."""

    SIBLING_ON_RIGHT = "sibling_on_right"
    SIBLING_ON_LEFT = "sibling_on_left"

    @property
    def is_right(self) -> bool:
        """The boolean wire flag: True means the accumulated value is the left operand."""
        return self is Orientation.SIBLING_ON_RIGHT

    @classmethod
    def from_flag(cls, is_right: bool) -> "Orientation":
        return cls.SIBLING_ON_RIGHT if is_right else cls.SIBLING_ON_LEFT

    @classmethod
    def for_index(cls, index: int) -> "Orientation":
        """Orientation of the sibling of the node at ``index``."""
        return cls.SIBLING_ON_RIGHT if index % 2 == 0 else cls.SIBLING_ON_LEFT


@dataclass(frozen=True)
class ProofStep:
    """One sibling digest and the side it is hashed on."""
    sibling: bytes
    orientation: Orientation

    def combine(self, current: bytes) -> bytes:
        """Hash ``current`` with this step's sibling in the recorded order."""
        if self.orientation is Orientation.SIBLING_ON_RIGHT:
            return merkle_parent(current, self.sibling)
        return merkle_parent(self.sibling, current)

    def as_pair(self) -> tuple[bytes, bool]:
        return self.sibling, self.orientation.is_right

    @classmethod
    def from_pair(cls, pair: tuple[bytes, bool]) -> "ProofStep":
        sibling, is_right = pair
        return cls(sibling=bytes(sibling), orientation=Orientation.from_flag(bool(is_right)))


@dataclass(frozen=True)
class InclusionProof:
    """
    Inclusion proof for a single leaf.

    Attributes:
        leaf_index: 0-based index of the proven leaf
        leaf_count: Number of leaves of the tree the proof was cut from
        steps: Sibling steps from bottom to top; self-paired levels are skipped
    """
    leaf_index: int
    leaf_count: int
    steps: tuple[ProofStep, ...]

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[ProofStep]:
        return iter(self.steps)

    def as_pairs(self) -> list[tuple[bytes, bool]]:
        """Steps as (sibling, is_right) pairs."""
        return [step.as_pair() for step in self.steps]


@dataclass(frozen=True)
class VerificationOutcome:
    """Result of recomputing a root from a leaf and a proof."""
    matches: bool
    hash_operations: int

    def __bool__(self) -> bool:
        return self.matches


ProofInput = Union[InclusionProof, Iterable[Union[ProofStep, tuple[bytes, bool]]]]


def generate_proof(tree: MerkleTree, leaf_index: int) -> InclusionProof:
    """
    Generate an inclusion proof for the leaf at ``leaf_index``.

    Walks from level 0 up to (but excluding) the root level. At each level a
    PAIRED node records its sibling; a SELF_PAIRED node records nothing.

    Args:
        tree: A built MerkleTree
        leaf_index: 0-based index of the leaf to prove

    Returns:
        InclusionProof whose length is tree height minus one, minus the
        number of self-paired levels crossed

    Raises:
        IndexOutOfRangeException: If leaf_index < 0 or >= tree.leaf_count
    """
    if leaf_index < 0 or leaf_index >= tree.leaf_count:
        raise IndexOutOfRangeException(leaf_index, tree.leaf_count)

    steps: list[ProofStep] = []
    current_index = leaf_index

    for level_number in range(tree.height - 1):
        if tree.pairing(level_number, current_index) is Pairing.PAIRED:
            orientation = Orientation.for_index(current_index)
            if orientation is Orientation.SIBLING_ON_RIGHT:
                sibling_index = current_index + 1
            else:
                sibling_index = current_index - 1
            steps.append(
                ProofStep(
                    sibling=tree.levels[level_number][sibling_index],
                    orientation=orientation,
                )
            )
        current_index //= 2

    return InclusionProof(
        leaf_index=leaf_index,
        leaf_count=tree.leaf_count,
        steps=tuple(steps),
    )


def _coerce_step(step: Union[ProofStep, tuple[bytes, bool]]) -> ProofStep:
    if isinstance(step, ProofStep):
        return step
    return ProofStep.from_pair(step)


def _recompute_chain(leaf: bytes, steps: Sequence[ProofStep]) -> tuple[bytes, int]:
    current = leaf
    for step in steps:
        current = step.combine(current)
    return current, len(steps)


def _recompute_shaped(leaf: bytes, proof: InclusionProof) -> tuple[bytes | None, int]:
    """
    Recompute the root level by level using the proof's tree shape.

    Returns (None, operations) when the proof does not fit the shape:
    too few steps, leftover steps, or an impossible index.
    """
    index = proof.leaf_index
    width = proof.leaf_count
    if width < 1 or index < 0 or index >= width:
        return None, 0

    current = leaf
    consumed = 0
    operations = 0
    while width > 1:
        if pairing_for(index, width) is Pairing.SELF_PAIRED:
            current = merkle_parent(current, current)
        else:
            if consumed >= len(proof.steps):
                return None, operations
            current = proof.steps[consumed].combine(current)
            consumed += 1
        operations += 1
        index //= 2
        width = (width + 1) // 2

    if consumed != len(proof.steps):
        return None, operations
    return current, operations


def verify_proof(leaf: bytes, proof: ProofInput, root: bytes) -> VerificationOutcome:
    """
    Verify an inclusion proof against an expected root.

    Starting from the raw leaf bytes, each step hashes the accumulated value
    with its sibling on the recorded side. The final value is compared
    byte-for-byte with ``root``.

    Args:
        leaf: Raw leaf bytes (not hashed first)
        proof: An InclusionProof, or any iterable of ProofStep /
               (sibling, is_right) pairs
        root: Expected root

    Returns:
        VerificationOutcome with the match result and the number of hash
        operations performed
    """
    if isinstance(proof, InclusionProof):
        computed, operations = _recompute_shaped(leaf, proof)
    else:
        steps = [_coerce_step(step) for step in proof]
        computed, operations = _recompute_chain(leaf, steps)

    matches = computed is not None and computed == root
    logger.debug("Verified proof: matches=%s hash_operations=%d", matches, operations)
    return VerificationOutcome(matches=matches, hash_operations=operations)


class MerkleProver:
    """
    Convenience class for generating Merkle proofs straight from leaves.

    Example:
        >>> proof = MerkleProver.prove(leaves, index=1)
        >>> MerkleVerifier.verify(leaves[1], proof, MerkleProver.compute_root(leaves))
        True
    """

    @staticmethod
    def prove(leaves: Sequence[bytes], index: int) -> InclusionProof:
        """
        Build a tree over ``leaves`` and prove the leaf at ``index``.

        Raises:
            EmptyInputException: If leaves is empty
            IndexOutOfRangeException: If index is out of range
        """
        tree, _ = build_merkle_tree(leaves)
        return generate_proof(tree, index)

    @staticmethod
    def compute_root(leaves: Sequence[bytes]) -> bytes:
        """Compute the Merkle root for a sequence of leaves."""
        tree, _ = build_merkle_tree(leaves)
        return tree.root


class MerkleVerifier:
    """Convenience class for verifying Merkle proofs."""

    @staticmethod
    def verify(leaf: bytes, proof: ProofInput, root: bytes) -> bool:
        """Return True if ``proof`` recomputes ``root`` from ``leaf``."""
        return verify_proof(leaf, proof, root).matches

    @staticmethod
    def verify_pairs(
        leaf: bytes,
        pairs: Sequence[tuple[bytes, bool]],
        root: bytes,
    ) -> bool:
        """Verify a proof given as raw (sibling, is_right) pairs."""
        return verify_proof(leaf, pairs, root).matches

    @staticmethod
    def require(leaf: bytes, proof: InclusionProof, root: bytes) -> VerificationOutcome:
        """
        Verify a proof and raise if it does not match.

        Raises:
            MerkleVerificationException: If the recomputed root differs
        """
        outcome = verify_proof(leaf, proof, root)
        if not outcome.matches:
            raise MerkleVerificationException(
                "Inclusion proof does not recompute the expected root",
                leaf_index=proof.leaf_index,
                details={"hash_operations": outcome.hash_operations},
            )
        return outcome


__all__ = [
    "Orientation",
    "ProofStep",
    "InclusionProof",
    "VerificationOutcome",
    "generate_proof",
    "verify_proof",
    "MerkleProver",
    "MerkleVerifier",
]
