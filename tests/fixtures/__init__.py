"""
Test fixtures package for Merkle engine tests.

This package provides factory functions for creating test objects:
- merkle_fixtures.py: leaf sets, built trees and tampering helpers

Usage:
    from fixtures import make_leaves, make_tree

    def test_something():
        tree = make_tree(5)
"""

from .merkle_fixtures import (
    flip_byte,
    make_label_leaves,
    make_leaves,
    make_raw_leaves,
    make_tree,
)

__all__ = [
    "flip_byte",
    "make_label_leaves",
    "make_leaves",
    "make_raw_leaves",
    "make_tree",
]
