"""
Runtime Configuration Module

Provides configuration loading and management for program runs.
"""

from .runtime import (
    DEFAULT_LEAF_COUNT,
    DEFAULT_LEAF_PREFIX,
    DEFAULT_VERIFICATION_INDEX,
    ProgramConfig,
    RuntimeConfig,
    load_runtime_config,
)

__all__ = [
    "DEFAULT_LEAF_COUNT",
    "DEFAULT_LEAF_PREFIX",
    "DEFAULT_VERIFICATION_INDEX",
    "ProgramConfig",
    "RuntimeConfig",
    "load_runtime_config",
]
