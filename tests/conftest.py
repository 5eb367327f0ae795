"""
Pytest configuration and shared fixtures for Merkle engine tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_merkle = importlib.import_module("fixtures.merkle_fixtures")

make_leaves = _merkle.make_leaves
make_tree = _merkle.make_tree


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def three_leaves():
    """Provide the three-leaf set used by the odd-tail examples."""
    return make_leaves(3)


@pytest.fixture
def seven_leaf_tree():
    """Provide a built seven-leaf tree."""
    return make_tree(7)


@pytest.fixture
def clean_merkle_env(monkeypatch):
    """Remove MERKLE_* variables so config tests start from defaults."""
    for name in [
        "MERKLE_LEAF_COUNT",
        "MERKLE_VERIFICATION_INDEX",
        "MERKLE_LEAF_PREFIX",
        "MERKLE_DEBUG",
        "MERKLE_LOG_LEVEL",
        "MERKLE_LOG_FILE",
        "MERKLE_OUTPUT_FORMAT",
    ]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
