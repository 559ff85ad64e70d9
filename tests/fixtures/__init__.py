"""
Test fixtures package for sparse Merkle tree tests.

This package provides golden vectors and factory functions:
- smt_fixtures.py: Known leaf sets/roots/proofs and leaf-set factories

Usage:
    from fixtures import make_scenario_a_leaves, SCENARIO_A_ROOT_HEX

    def test_something():
        tree = SparseMerkleTree.build(make_scenario_a_leaves(), depth=64)
        assert tree.root_hex() == SCENARIO_A_ROOT_HEX
"""

from .smt_fixtures import (
    SCENARIO_A_DEPTH,
    SCENARIO_A_ROOT_HEX,
    SCENARIO_A_PROOF_303_HEX,
    SCENARIO_B_DEPTH,
    SCENARIO_B_SLOT_HEX,
    SCENARIO_B_TX_HASH_HEX,
    SCENARIO_B_ROOT_HEX,
    SHA256_DEFAULT_NODE_0_HEX,
    SHA256_DEFAULT_NODE_1_HEX,
    make_scenario_a_leaves,
    make_scenario_b_leaves,
    make_random_leaves,
    make_adjacent_leaves,
    write_leaves_file,
)

__all__ = [
    # Golden vectors
    "SCENARIO_A_DEPTH",
    "SCENARIO_A_ROOT_HEX",
    "SCENARIO_A_PROOF_303_HEX",
    "SCENARIO_B_DEPTH",
    "SCENARIO_B_SLOT_HEX",
    "SCENARIO_B_TX_HASH_HEX",
    "SCENARIO_B_ROOT_HEX",
    "SHA256_DEFAULT_NODE_0_HEX",
    "SHA256_DEFAULT_NODE_1_HEX",
    # Factories
    "make_scenario_a_leaves",
    "make_scenario_b_leaves",
    "make_random_leaves",
    "make_adjacent_leaves",
    "write_leaves_file",
]
