"""
CLI Configuration

Configuration management for the Merkle CLI.
Supports environment variables and configuration files.
"""

from __future__ import annotations

import json
import os
from argparse import Namespace
from dataclasses import dataclass
from pathlib import Path

from core.config.runtime import DEFAULT_LEAF_COUNT, DEFAULT_VERIFICATION_INDEX


# Environment variable prefix
ENV_PREFIX = "MERKLE_"


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Program defaults
    leaf_count: int = DEFAULT_LEAF_COUNT
    verification_index: int = DEFAULT_VERIFICATION_INDEX

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"


def load_config_from_env() -> CLIConfig:
    """Load configuration from environment variables."""
    config = CLIConfig()

    if os.getenv(f"{ENV_PREFIX}LEAF_COUNT"):
        config.leaf_count = int(os.getenv(f"{ENV_PREFIX}LEAF_COUNT", str(DEFAULT_LEAF_COUNT)))
    if os.getenv(f"{ENV_PREFIX}VERIFICATION_INDEX"):
        config.verification_index = int(
            os.getenv(f"{ENV_PREFIX}VERIFICATION_INDEX", str(DEFAULT_VERIFICATION_INDEX))
        )

    config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO")
    config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")

    if os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"):
        config.default_output_format = os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT", "human")

    return config


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    config = CLIConfig()

    config.leaf_count = data.get("leaf_count", config.leaf_count)
    config.verification_index = data.get("verification_index", config.verification_index)

    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)

    config.default_output_format = data.get("default_output_format", config.default_output_format)

    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path and config_path.exists():
        config = load_config_from_file(config_path)

    default_paths = [
        Path.cwd() / "merkle.json",
        Path.cwd() / ".merkle.json",
        Path.home() / ".config" / "merkle" / "config.json",
    ]

    if config_path is None:
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    env_config = load_config_from_env()

    # Env takes precedence
    if os.getenv(f"{ENV_PREFIX}LEAF_COUNT"):
        config.leaf_count = env_config.leaf_count
    if os.getenv(f"{ENV_PREFIX}VERIFICATION_INDEX"):
        config.verification_index = env_config.verification_index
    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = env_config.log_level
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = env_config.log_file
    if os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"):
        config.default_output_format = env_config.default_output_format

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return f"""{{
  "leaf_count": {DEFAULT_LEAF_COUNT},
  "verification_index": {DEFAULT_VERIFICATION_INDEX},
  "log_level": "INFO",
  "log_file": null,
  "default_output_format": "human"
}}
"""


def resolve_program_inputs(
    args: Namespace,
    leaf_count: int | None,
    verification_index: int | None,
) -> tuple[int, int]:
    """
    Pick the leaf count and index for a command.

    Precedence: explicit flag, then the --runtime-config file (with its
    MERKLE_* overrides), then the CLI config file / MERKLE_* environment.
    """
    config: CLIConfig = getattr(args, "cli_config", None) or CLIConfig()
    runtime = getattr(args, "runtime", None)

    if getattr(args, "runtime_config", None) is not None and runtime is not None:
        default_count = runtime.program.leaf_count
        default_index = runtime.program.verification_index
    else:
        default_count = config.leaf_count
        default_index = config.verification_index

    return (
        leaf_count if leaf_count is not None else default_count,
        verification_index if verification_index is not None else default_index,
    )
