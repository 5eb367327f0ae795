"""
Merkle Program

One complete run over derived leaves:
1. Derive ``leaf_count`` leaves
2. Build the tree
3. Prove the leaf at ``verification_index``
4. Verify that proof against the root
5. Package the outputs as PublicValues (root coerced to 32 bytes)

The reported hash_operations is build operations plus verify operations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from core.config.runtime import RuntimeConfig, load_runtime_config
from core.crypto.hashing import to_hex
from core.merkle.merkle_proofs import InclusionProof, generate_proof, verify_proof
from core.merkle.merkle_tree import build_merkle_tree
from core.program.leaves import derive_leaves
from core.schemas.errors import SchemaValidationException
from core.schemas.public_values import UINT32_MAX, PublicValues, to_fixed_root


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgramOutput:
    """Everything a run produced, plus the encoded public values."""
    public_values: PublicValues
    encoded: bytes
    proof: InclusionProof
    build_hash_operations: int
    verify_hash_operations: int

    @property
    def root(self) -> bytes:
        return self.public_values.root

    @property
    def verified(self) -> bool:
        return self.public_values.verification_result

    @property
    def total_hash_operations(self) -> int:
        return self.build_hash_operations + self.verify_hash_operations


def check_uint32(value: int, field_path: str) -> None:
    if value < 0 or value > UINT32_MAX:
        raise SchemaValidationException(
            f"{field_path} must fit in uint32, got {value}",
            field_path=field_path,
        )


def run_merkle_program(
    leaf_count: Optional[int] = None,
    verification_index: Optional[int] = None,
    config: Optional[RuntimeConfig] = None,
) -> ProgramOutput:
    """
    Run the program for the given inputs.

    Arguments left as None fall back to ``config.program`` (or the default
    runtime configuration: defaults plus MERKLE_* overrides).

    Raises:
        SchemaValidationException: If an input does not fit in uint32
        EmptyInputException: If leaf_count is 0
        IndexOutOfRangeException: If verification_index >= leaf_count
        MalformedRootException: If the root is not 32 bytes
    """
    config = config or load_runtime_config()
    if leaf_count is None:
        leaf_count = config.program.leaf_count
    if verification_index is None:
        verification_index = config.program.verification_index

    check_uint32(leaf_count, "leaf_count")
    check_uint32(verification_index, "verification_index")

    logger.info("Building Merkle tree with %d leaves", leaf_count)
    leaves = derive_leaves(leaf_count, config.program.leaf_prefix)

    tree, build_ops = build_merkle_tree(leaves)
    logger.info("Built Merkle tree with %d hash operations", build_ops)
    logger.info("Merkle root: %s", to_hex(tree.root))

    proof = generate_proof(tree, verification_index)
    outcome = verify_proof(tree.leaf(verification_index), proof, tree.root)
    logger.info("Verification result: %s", outcome.matches)

    total_ops = build_ops + outcome.hash_operations
    logger.info("Total hash operations: %d", total_ops)

    public_values = PublicValues(
        leaf_count=leaf_count,
        verification_index=verification_index,
        root=to_fixed_root(tree.root),
        verification_result=outcome.matches,
        hash_operations=total_ops,
    )

    return ProgramOutput(
        public_values=public_values,
        encoded=public_values.encode(),
        proof=proof,
        build_hash_operations=build_ops,
        verify_hash_operations=outcome.hash_operations,
    )
