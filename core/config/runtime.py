"""
Runtime Configuration

Central configuration for program runs: tree width, target leaf and
leaf derivation.
"""

from __future__ import annotations

import copy
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


DEFAULT_LEAF_COUNT = 128
DEFAULT_VERIFICATION_INDEX = 42
DEFAULT_LEAF_PREFIX = "Leaf data "


@dataclass
class ProgramConfig:
    """Inputs of a program run."""
    leaf_count: int = DEFAULT_LEAF_COUNT
    verification_index: int = DEFAULT_VERIFICATION_INDEX
    leaf_prefix: str = DEFAULT_LEAF_PREFIX


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction

    ``debug`` turns on DEBUG logging for the ``core`` package.
    """
    program: ProgramConfig = field(default_factory=ProgramConfig)
    debug: bool = False

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - MERKLE_LEAF_COUNT: Number of leaves to derive
        - MERKLE_VERIFICATION_INDEX: Leaf index to prove and verify
        - MERKLE_LEAF_PREFIX: Label prefix hashed into each leaf
        - MERKLE_DEBUG: Enable debug mode (true/false)
        """
        overrides: dict[str, Any] = {}

        if os.getenv("MERKLE_LEAF_COUNT"):
            overrides.setdefault("program", {})["leaf_count"] = int(os.getenv("MERKLE_LEAF_COUNT"))
        if os.getenv("MERKLE_VERIFICATION_INDEX"):
            overrides.setdefault("program", {})["verification_index"] = int(
                os.getenv("MERKLE_VERIFICATION_INDEX")
            )
        if os.getenv("MERKLE_LEAF_PREFIX") is not None:
            overrides.setdefault("program", {})["leaf_prefix"] = os.getenv("MERKLE_LEAF_PREFIX")

        if os.getenv("MERKLE_DEBUG"):
            overrides["debug"] = os.getenv("MERKLE_DEBUG", "false").lower() == "true"

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        program_data = data.get("program", {})
        program = ProgramConfig(**program_data) if program_data else ProgramConfig()

        return cls(
            program=program,
            debug=bool(data.get("debug", False)),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "program" in overrides:
            for key, value in overrides["program"].items():
                setattr(new_config.program, key, value)

        if "debug" in overrides:
            new_config.debug = overrides["debug"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "program": {
                "leaf_count": self.program.leaf_count,
                "verification_index": self.program.verification_index,
                "leaf_prefix": self.program.leaf_prefix,
            },
            "debug": self.debug,
        }


def load_runtime_config(path: Optional[str | Path] = None) -> RuntimeConfig:
    """
    Load the runtime configuration for a run.

    Starts from the YAML file at ``path`` (or the defaults when no path is
    given), then applies MERKLE_* environment overrides.

    Raises:
        FileNotFoundError: If ``path`` is given but does not exist
    """
    if path is not None:
        config = RuntimeConfig.from_yaml(path)
        logger.info("Loaded runtime config from %s", path)
    else:
        config = RuntimeConfig()

    return config.with_env_overrides()
