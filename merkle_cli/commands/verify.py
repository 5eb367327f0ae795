"""
CLI Verify Command

Verify a proof document offline.

Usage:
    merkle verify proof.json [--root 0x...] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from core.crypto.hashing import from_hex, to_hex
from core.merkle import ProofDocument, verify_proof
from core.schemas.errors import MerkleException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    proof_path: str = ""
    leaf_index: int = 0
    leaf_count: int = 0
    root: str = ""
    matches: bool = False
    hash_operations: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"proof: {summary.proof_path}")
    print(f"leaf_index: {summary.leaf_index}")
    print(f"leaf_count: {summary.leaf_count}")
    print(f"root: {summary.root}")
    print(f"matches: {str(summary.matches).lower()}")
    print(f"hash_operations: {summary.hash_operations}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (2 if the proof does not recompute the root)
    """
    proof_path = Path(args.proof_path)
    if not proof_path.exists():
        print(f"Error: Proof file not found: {proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        document = ProofDocument.from_json(proof_path.read_text())
        root = from_hex(args.root) if args.root else document.root_bytes
    except (MerkleException, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    logger.info("Verifying proof for leaf %d of %d", document.leaf_index, document.leaf_count)
    outcome = verify_proof(document.leaf_bytes, document.to_inclusion_proof(), root)

    summary = VerifySummary(
        proof_path=str(proof_path),
        leaf_index=document.leaf_index,
        leaf_count=document.leaf_count,
        root=to_hex(root),
        matches=outcome.matches,
        hash_operations=outcome.hash_operations,
    )

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    if not outcome.matches:
        return EXIT_VERIFICATION_FAILED
    return EXIT_SUCCESS
