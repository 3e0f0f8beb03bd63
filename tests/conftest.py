"""
Pytest configuration and shared fixtures for multiproof tests.

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

_common = importlib.import_module("fixtures.common")

make_values = _common.make_values
make_tree = _common.make_tree


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def sixteen_values():
    """The values "1" .. "16"."""
    return make_values(16)


@pytest.fixture
def sixteen_tree(sixteen_values):
    """A power-of-two tree over "1" .. "16"."""
    from core.merkle.merkle_tree import build_tree
    return build_tree(sixteen_values)


@pytest.fixture
def five_tree():
    """An odd tree whose last leaf is promoted twice."""
    return make_tree(5)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove MULTIPROOF_* variables so config tests start from defaults."""
    for name in (
        "MULTIPROOF_HASH_ALGORITHM",
        "MULTIPROOF_ALLOW_EMPTY_TREE",
        "MULTIPROOF_DEFAULT_ENCODING",
        "MULTIPROOF_LOG_LEVEL",
        "MULTIPROOF_LOG_FILE",
    ):
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
