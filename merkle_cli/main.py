"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m merkle_cli execute [--leaf-count N] [--verification-index I] [--json] [--encoded]
    python -m merkle_cli prove [--leaf-count N] [--index I] [--out PATH]
    python -m merkle_cli verify <proof_path> [--root HEX] [--json]
    python -m merkle_cli decode <hex> [--json]
    python -m merkle_cli config --init
    python -m merkle_cli --runtime-config runtime.yaml execute --json

Environment Variables:
    MERKLE_LEAF_COUNT           Default leaf count (default: 128)
    MERKLE_VERIFICATION_INDEX   Default leaf index (default: 42)
    MERKLE_LEAF_PREFIX          Label prefix hashed into each leaf
    MERKLE_LOG_LEVEL            Log level (default: INFO)
    MERKLE_LOG_FILE             Optional log file
    MERKLE_OUTPUT_FORMAT        "human" or "json"
    MERKLE_DEBUG                "true" turns on DEBUG logs for the core package
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from dataclasses import asdict
from pathlib import Path
from typing import Sequence

from core.config import RuntimeConfig, load_runtime_config
from merkle_cli import __version__
from merkle_cli.commands import decode, execute, prove, verify
from merkle_cli.config import get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="merkle",
        description="Merkle CLI - Build trees, generate and verify inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./merkle.json or ~/.config/merkle/config.json)",
    )
    parser.add_argument(
        "--runtime-config", "-r",
        type=Path,
        default=None,
        help="YAML runtime config (program.leaf_count, program.verification_index, "
             "program.leaf_prefix, debug); MERKLE_* variables still override it",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- execute command ---
    execute_parser = subparsers.add_parser(
        "execute",
        help="Build, prove and verify once, then report the public values",
        description="Run the program over derived leaves and print its public values.",
    )
    execute_parser.add_argument(
        "--leaf-count",
        type=int,
        default=None,
        help="Number of leaves (default: from config, 128)",
    )
    execute_parser.add_argument(
        "--verification-index",
        type=int,
        default=None,
        help="Leaf index to prove and verify (default: from config, 42)",
    )
    execute_parser.add_argument(
        "--encoded",
        action="store_true",
        default=False,
        help="Include the ABI-encoded public values",
    )
    execute_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    execute_parser.set_defaults(func=execute.execute_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Write an inclusion proof document",
        description="Build a tree over derived leaves and emit the proof for one leaf.",
    )
    prove_parser.add_argument(
        "--leaf-count",
        type=int,
        default=None,
        help="Number of leaves (default: from config, 128)",
    )
    prove_parser.add_argument(
        "--index",
        type=int,
        default=None,
        help="Leaf index to prove (default: from config, 42)",
    )
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Output path for the proof document (default: stdout)",
    )
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a proof document offline",
        description="Recompute the root from a proof document and compare it.",
    )
    verify_parser.add_argument(
        "proof_path",
        type=str,
        help="Path to a proof document (JSON)",
    )
    verify_parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Expected root (0x hex); defaults to the root stored in the document",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- decode command ---
    decode_parser = subparsers.add_parser(
        "decode",
        help="Decode ABI-encoded public values",
        description="Decode the 160-byte public values record.",
    )
    decode_parser.add_argument(
        "encoded",
        type=str,
        help="Encoded public values (0x hex)",
    )
    decode_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="JSON output",
    )
    decode_parser.set_defaults(func=decode.decode_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="merkle.json",
        help="Path for config file (default: merkle.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (MERKLE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        config = load_config(Path(args.path) if args.path else None)
        runtime: RuntimeConfig = getattr(args, "runtime", None) or load_runtime_config()
        shown = asdict(config)
        shown["runtime"] = runtime.to_dict()
        print(json.dumps(shown, indent=2))
        return EXIT_SUCCESS

    print("Usage: merkle config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
        runtime = load_runtime_config(args.runtime_config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)
    if runtime.debug:
        logging.getLogger("core").setLevel(logging.DEBUG)

    # Attach config to args for commands to use
    args.cli_config = config
    args.runtime = runtime

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if runtime.debug or config.log_level.upper() == "DEBUG" or args.log_level == "DEBUG":
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
