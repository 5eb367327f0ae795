"""
CLI Prove Command

Build a tree over derived leaves and write the inclusion proof for one leaf
as a canonical JSON proof document.

Usage:
    merkle prove --leaf-count 128 --index 42 --out proof.json
    merkle prove --leaf-count 3 --index 2
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.config import RuntimeConfig, load_runtime_config
from core.merkle import ProofDocument, build_merkle_tree, generate_proof
from core.program import check_uint32, derive_leaves
from core.schemas.errors import MerkleException
from merkle_cli.config import resolve_program_inputs


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def build_proof_document(leaf_count: int, index: int, leaf_prefix: str) -> ProofDocument:
    """
    Derive leaves, build the tree and package the proof for ``index``.

    Raises:
        SchemaValidationException: If leaf_count or index does not fit in uint32
        EmptyInputException: If leaf_count is 0
        IndexOutOfRangeException: If index >= leaf_count
    """
    check_uint32(leaf_count, "leaf_count")
    check_uint32(index, "verification_index")

    leaves = derive_leaves(leaf_count, leaf_prefix)
    tree, build_ops = build_merkle_tree(leaves)
    logger.info("Built Merkle tree with %d hash operations", build_ops)
    proof = generate_proof(tree, index)
    return ProofDocument.from_proof(tree.leaf(index), proof, tree.root)


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    runtime: RuntimeConfig = getattr(args, "runtime", None) or load_runtime_config()
    leaf_count, index = resolve_program_inputs(args, args.leaf_count, args.index)

    try:
        document = build_proof_document(leaf_count, index, runtime.program.leaf_prefix)
    except MerkleException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    payload = document.to_json()

    if args.out:
        out_path = Path(args.out)
        out_path.write_text(payload + "\n")
        logger.info("Wrote proof document to: %s", out_path)
        print(f"leaf_index: {document.leaf_index}")
        print(f"leaf_count: {document.leaf_count}")
        print(f"root: {document.root}")
        print(f"steps: {len(document.steps)}")
        print(f"saved: {out_path}")
    else:
        print(payload)

    return EXIT_SUCCESS
