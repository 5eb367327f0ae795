"""
CLI Execute Command

Run the Merkle program once and report its public values.

Usage:
    merkle execute --leaf-count 128 --verification-index 42
    merkle execute --leaf-count 5 --verification-index 4 --json --encoded
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from core.config import RuntimeConfig, load_runtime_config
from core.crypto.hashing import to_hex
from core.program import ProgramOutput, run_merkle_program
from core.schemas.errors import MerkleException
from merkle_cli.config import CLIConfig, resolve_program_inputs


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class ExecuteSummary:
    """Summary of a program run for CLI output."""
    leaf_count: int = 0
    verification_index: int = 0
    root: str = ""
    verification_result: bool = False
    hash_operations: int = 0
    build_hash_operations: int = 0
    verify_hash_operations: int = 0
    proof_length: int = 0
    public_values: str | None = None
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["public_values"] is None:
            del d["public_values"]
        if not d["errors"]:
            del d["errors"]
        return d


def build_summary(output: ProgramOutput, include_encoded: bool = False) -> ExecuteSummary:
    """Build an ExecuteSummary from a program output."""
    values = output.public_values
    return ExecuteSummary(
        leaf_count=values.leaf_count,
        verification_index=values.verification_index,
        root=to_hex(values.root),
        verification_result=values.verification_result,
        hash_operations=values.hash_operations,
        build_hash_operations=output.build_hash_operations,
        verify_hash_operations=output.verify_hash_operations,
        proof_length=len(output.proof),
        public_values=to_hex(output.encoded) if include_encoded else None,
    )


def print_summary_human(summary: ExecuteSummary) -> None:
    """Print summary in human-readable format."""
    print(f"leaf_count: {summary.leaf_count}")
    print(f"verification_index: {summary.verification_index}")
    print(f"root: {summary.root}")
    print(f"verification_result: {str(summary.verification_result).lower()}")
    print(f"hash_operations: {summary.hash_operations}")
    print(f"  build: {summary.build_hash_operations}")
    print(f"  verify: {summary.verify_hash_operations}")
    print(f"proof_length: {summary.proof_length}")
    if summary.public_values is not None:
        print(f"public_values: {summary.public_values}")


def print_summary_json(summary: ExecuteSummary) -> None:
    """Print summary in JSON format."""
    print(json.dumps(summary.to_dict(), indent=2))


def execute_cmd(args: Namespace) -> int:
    """
    Execute the execute command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config: CLIConfig = getattr(args, "cli_config", None) or CLIConfig()
    runtime: RuntimeConfig = getattr(args, "runtime", None) or load_runtime_config()
    leaf_count, verification_index = resolve_program_inputs(
        args, args.leaf_count, args.verification_index
    )
    output_json = args.json or config.default_output_format == "json"

    logger.info("leaf_count: %d", leaf_count)
    logger.info("verification_index: %d", verification_index)

    try:
        output = run_merkle_program(leaf_count, verification_index, config=runtime)
    except MerkleException as e:
        if output_json:
            print(json.dumps({"ok": False, "error": e.to_error_model().model_dump()}, indent=2))
        else:
            print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = build_summary(output, include_encoded=args.encoded)

    if output_json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)

    if not output.verified:
        return EXIT_VERIFICATION_FAILED
    return EXIT_SUCCESS
