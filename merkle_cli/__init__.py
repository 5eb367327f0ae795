"""
Merkle CLI

Command-line interface for the Merkle inclusion engine.

Usage:
    python -m merkle_cli execute --leaf-count 128 --verification-index 42
    python -m merkle_cli prove --leaf-count 128 --index 42 --out proof.json
    python -m merkle_cli verify proof.json
    python -m merkle_cli decode 0x...
    python -m merkle_cli config --init
"""

__version__ = "0.1.0"
