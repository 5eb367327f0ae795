"""
Merkle Tree Builder
Deterministic level-by-level Merkle tree construction.

This module provides:
- Level-by-level tree construction with a hash-operation counter
- The explicit pairing rule shared by the builder and the proof generator
- Standard duplication rule for odd-width levels

Canonical Commitment Rules (Hard Contracts):
1. Level 0 holds the leaves verbatim: leaves are never hashed by the builder
2. Parent hashing: parent = sha256(left + right)
3. Odd-tail rule: the last node of an odd-width level is paired with itself
4. Empty leaves: rejected with EmptyInputException (no sentinel root)
5. Single leaf: root = leaf, zero hash operations

Determinism Notes:
- No randomness or non-deterministic ordering
- Leaf ordering is defined by the caller and never sorted here
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from core.crypto.hashing import hash_concat
from core.schemas.errors import EmptyInputException


logger = logging.getLogger(__name__)

Level = tuple[bytes, ...]


class Pairing(str, Enum):
    """How a node is combined with its neighbour when building the next level."""

    PAIRED = "paired"
    SELF_PAIRED = "self_paired"


def pairing_for(index: int, width: int) -> Pairing:
    """
    Classify the node at ``index`` of a level holding ``width`` nodes.

    A node is SELF_PAIRED only when it is the unmatched tail of an odd-width
    level; every other node has a real sibling at ``index ^ 1``.
    """
    if (index ^ 1) < width:
        return Pairing.PAIRED
    return Pairing.SELF_PAIRED


def merkle_parent(left: bytes, right: bytes) -> bytes:
    """
    Compute the parent hash of two child nodes.

    Args:
        left: Left child bytes
        right: Right child bytes

    Returns:
        Parent hash (32 bytes)
    """
    return hash_concat(left, right)


def pair_level(level: Sequence[bytes]) -> list[bytes]:
    """
    Build the next level up from ``level``.

    Pairs are consumed left to right, non-overlapping. Each produced entry
    costs exactly one hash operation, so the caller's counter advances by
    ``len(result)``.
    """
    width = len(level)
    next_level: list[bytes] = []
    for i in range(0, width, 2):
        left = level[i]
        if pairing_for(i, width) is Pairing.PAIRED:
            right = level[i + 1]
        else:
            right = left
        next_level.append(merkle_parent(left, right))
    return next_level


@dataclass(frozen=True)
class MerkleTree:
    """
    A fully built Merkle tree.

    Attributes:
        levels: Level 0 is the leaves as supplied, the last level holds
                the single root entry. Each level k+1 has
                ceil(len(level k) / 2) entries.
    """
    levels: tuple[Level, ...]

    def __post_init__(self) -> None:
        if not self.levels or not self.levels[0]:
            raise EmptyInputException()
        if len(self.levels[-1]) != 1:
            raise ValueError(
                f"Top level must hold exactly one root, got {len(self.levels[-1])}"
            )

    @property
    def root(self) -> bytes:
        """The single entry of the final level."""
        return self.levels[-1][0]

    @property
    def leaves(self) -> Level:
        return self.levels[0]

    @property
    def leaf_count(self) -> int:
        return len(self.levels[0])

    @property
    def height(self) -> int:
        """Number of levels, leaves and root included."""
        return len(self.levels)

    def leaf(self, index: int) -> bytes:
        return self.levels[0][index]

    def pairing(self, level: int, index: int) -> Pairing:
        """Pairing of the node at ``index`` within ``level``."""
        return pairing_for(index, len(self.levels[level]))


def build_merkle_tree(leaves: Sequence[bytes]) -> tuple[MerkleTree, int]:
    """
    Build a Merkle tree from an ordered sequence of leaves.

    Algorithm:
    1. Level 0 = leaves, taken as-is
    2. While the current level has more than one entry, pair entries
       (duplicating an odd tail) and hash each pair into the next level
    3. Stop once a level of exactly one entry is produced: the root

    Example: [a, b, c] -> [parent(a,b), parent(c,c)] -> [root]

    Args:
        leaves: Ordered leaf byte strings of arbitrary length

    Returns:
        (tree, hash_operations) where hash_operations is the number of
        internal nodes computed (leaves are never counted)

    Raises:
        EmptyInputException: If ``leaves`` is empty
        TypeError: If a leaf is not bytes, bytearray or memoryview
    """
    if len(leaves) == 0:
        raise EmptyInputException()

    for position, leaf in enumerate(leaves):
        if not isinstance(leaf, (bytes, bytearray, memoryview)):
            raise TypeError(
                f"Leaf {position} must be bytes-like, got {type(leaf).__name__}"
            )

    levels: list[Level] = [tuple(bytes(leaf) for leaf in leaves)]
    hash_operations = 0

    while len(levels[-1]) > 1:
        next_level = pair_level(levels[-1])
        hash_operations += len(next_level)
        levels.append(tuple(next_level))

    logger.debug(
        "Built Merkle tree: leaves=%d levels=%d hash_operations=%d",
        len(leaves), len(levels), hash_operations,
    )
    return MerkleTree(levels=tuple(levels)), hash_operations


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """
    Compute only the Merkle root for a sequence of leaves.

    Raises:
        EmptyInputException: If ``leaves`` is empty
    """
    tree, _ = build_merkle_tree(leaves)
    return tree.root


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the number of levels of a tree with ``num_leaves`` leaves.

    A single leaf has depth 1, two leaves have depth 2, five leaves
    (5 -> 3 -> 2 -> 1) have depth 4.

    Returns:
        Tree depth (0 for an empty tree)
    """
    if num_leaves <= 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1

    return depth


__all__ = [
    "Level",
    "Pairing",
    "pairing_for",
    "merkle_parent",
    "pair_level",
    "MerkleTree",
    "build_merkle_tree",
    "build_merkle_root",
    "compute_tree_depth",
]
