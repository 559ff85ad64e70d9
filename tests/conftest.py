"""
Pytest configuration and shared fixtures for sparse Merkle tree tests.

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

_smt = importlib.import_module("fixtures.smt_fixtures")

make_scenario_a_leaves = _smt.make_scenario_a_leaves
make_scenario_b_leaves = _smt.make_scenario_b_leaves
make_random_leaves = _smt.make_random_leaves

from core.merkle.sparse_merkle_tree import SparseMerkleTree  # noqa: E402


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def scenario_a_leaves():
    """Provide the five-transaction leaf set."""
    return make_scenario_a_leaves()


@pytest.fixture
def scenario_a_tree(scenario_a_leaves):
    """Provide the depth-64 tree over the five-transaction leaf set."""
    return SparseMerkleTree.build(scenario_a_leaves, depth=_smt.SCENARIO_A_DEPTH)


@pytest.fixture
def scenario_b_tree():
    """Provide the depth-64 single-leaf tree."""
    return SparseMerkleTree.build(make_scenario_b_leaves(), depth=_smt.SCENARIO_B_DEPTH)


@pytest.fixture
def random_leaves():
    """Provide a deterministic random leaf set at depth 16."""
    return make_random_leaves(count=24, depth=16)


@pytest.fixture(autouse=True)
def _clear_smt_env(monkeypatch):
    """Keep SMT_* variables from the developer's shell out of tests."""
    for name in (
        "SMT_DEPTH",
        "SMT_HASH_ALGORITHM",
        "SMT_LEAF_ENCODING",
        "SMT_LOG_LEVEL",
        "SMT_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)


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


# =============================================================================
# Test Helpers (available to all tests via fixtures)
# =============================================================================

@pytest.fixture
def assert_check_failed():
    """Helper to assert a specific check failed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert not checks[0].ok, f"Check '{check_id}' unexpectedly passed"
    return _assert
