"""
Program runs: leaf derivation and the build/prove/verify/package sequence.
"""
from .leaves import derive_leaf, derive_leaves
from .merkle_program import ProgramOutput, check_uint32, run_merkle_program

__all__ = [
    "derive_leaf",
    "derive_leaves",
    "ProgramOutput",
    "check_uint32",
    "run_merkle_program",
]
