"""
CLI Decode Command

Decode ABI-encoded public values (160 bytes, 0x hex).

Usage:
    merkle decode 0x0000...0086 [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from core.crypto.hashing import from_hex
from core.schemas.errors import MerkleException
from core.schemas.public_values import decode_public_values


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def decode_cmd(args: Namespace) -> int:
    """
    Execute the decode command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    try:
        values = decode_public_values(from_hex(args.encoded.strip()))
    except (MerkleException, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    data = values.to_display_dict()
    if args.json:
        print(json.dumps(data, indent=2))
    else:
        for key, value in data.items():
            if isinstance(value, bool):
                value = str(value).lower()
            print(f"{key}: {value}")

    return EXIT_SUCCESS
