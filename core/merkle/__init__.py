"""
Merkle Tree Engine
Build-once Merkle tree construction, inclusion proof generation and verification.

This module provides:
- MerkleTree / build_merkle_tree: level-by-level tree with hash-operation count
- generate_proof: ordered (sibling, orientation) steps for one leaf
- verify_proof: recompute a root and report (matches, hash_operations)

Canonical Commitment Rules:
1. Level 0 = leaves verbatim
2. Parent hashing: sha256(left + right)
3. Odd tail: last node of an odd level is paired with itself
4. Empty tree: rejected
5. Single leaf: root = leaf

Usage:
    from core.merkle import build_merkle_tree, generate_proof, verify_proof

    tree, build_ops = build_merkle_tree(leaves)
    proof = generate_proof(tree, 2)
    outcome = verify_proof(leaves[2], proof, tree.root)
    assert outcome.matches
"""
from .merkle_tree import (
    Level,
    MerkleTree,
    Pairing,
    pairing_for,
    merkle_parent,
    pair_level,
    build_merkle_tree,
    build_merkle_root,
    compute_tree_depth,
)

from .merkle_proofs import (
    Orientation,
    ProofStep,
    InclusionProof,
    VerificationOutcome,
    generate_proof,
    verify_proof,
    MerkleProver,
    MerkleVerifier,
)

from .proof_document import (
    ProofDocument,
    ProofStepModel,
)


__all__ = [
    # Tree
    "Level",
    "MerkleTree",
    "Pairing",
    "pairing_for",
    "merkle_parent",
    "pair_level",
    "build_merkle_tree",
    "build_merkle_root",
    "compute_tree_depth",
    # Proofs
    "Orientation",
    "ProofStep",
    "InclusionProof",
    "VerificationOutcome",
    "generate_proof",
    "verify_proof",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
    # Serialization
    "ProofDocument",
    "ProofStepModel",
]
