"""
CLI command modules.
"""

from merkle_cli.commands import decode, execute, prove, verify

__all__ = ["decode", "execute", "prove", "verify"]
