"""
Default-Node Table Unit Tests
Tests for core/merkle/default_nodes.py

Tests:
- Known SHA-256 values for the lowest levels
- Recurrence DN[i] = hash(DN[i-1] + DN[i-1])
- Table length and fixed width
- Empty tree root is DN[depth]
"""
import pytest

from core.crypto.hashing import HASH_SIZE, blake2s, sha256
from core.merkle.default_nodes import (
    DEFAULT_SMT_DEPTH,
    MAX_SMT_DEPTH,
    ZERO_LEAF,
    build_default_nodes,
)
from core.merkle.sparse_merkle_tree import SparseMerkleTree
from fixtures.smt_fixtures import SHA256_DEFAULT_NODE_0_HEX, SHA256_DEFAULT_NODE_1_HEX


SHA256_DEFAULT_NODE_64_HEX = "25441aeb06532079d31e076f0210a8f2d14175fff809058f10f8e40e3bcea40d"


class TestDefaultNodeValues:
    """Golden values for the SHA-256 table."""

    def test_level_zero_is_hash_of_zero_leaf(self):
        nodes = build_default_nodes(4)
        assert ZERO_LEAF == bytes(32)
        assert nodes[0] == sha256(bytes(32))
        assert nodes[0].hex() == SHA256_DEFAULT_NODE_0_HEX

    def test_level_one(self):
        nodes = build_default_nodes(4)
        assert nodes[1].hex() == SHA256_DEFAULT_NODE_1_HEX

    def test_top_level_at_depth_64(self):
        nodes = build_default_nodes(64)
        assert nodes[64].hex() == SHA256_DEFAULT_NODE_64_HEX


class TestDefaultNodeTable:
    """Structural properties of the table."""

    @pytest.mark.parametrize("depth", [1, 8, 64])
    def test_table_has_depth_plus_one_entries(self, depth):
        assert len(build_default_nodes(depth)) == depth + 1

    def test_recurrence(self):
        """Each entry is the hash of the previous one concatenated with itself."""
        nodes = build_default_nodes(16)
        for level in range(1, 17):
            assert nodes[level] == sha256(nodes[level - 1] + nodes[level - 1])

    def test_all_entries_fixed_width(self):
        assert all(len(node) == HASH_SIZE for node in build_default_nodes(64))

    def test_shorter_table_is_prefix_of_longer(self):
        assert build_default_nodes(64)[:9] == build_default_nodes(8)

    def test_hash_function_changes_table(self):
        assert build_default_nodes(4, blake2s)[0] == blake2s(bytes(32))
        assert build_default_nodes(4, blake2s) != build_default_nodes(4)

    def test_bad_hash_function_rejected(self):
        """A hash function with a short digest cannot build a table."""
        with pytest.raises(ValueError, match="32 bytes"):
            build_default_nodes(2, lambda data: data[:16])

    def test_depth_constants(self):
        assert DEFAULT_SMT_DEPTH == 64
        assert MAX_SMT_DEPTH == 64


class TestEmptyTreeRoot:
    """The root of a tree with no leaves is the top default node."""

    @pytest.mark.parametrize("depth", [1, 5, 64])
    def test_empty_root_is_top_default_node(self, depth):
        tree = SparseMerkleTree.build_empty(depth)
        assert tree.root == build_default_nodes(depth)[depth]

    def test_empty_root_depth_64_golden(self):
        assert SparseMerkleTree.build_empty().root_hex() == SHA256_DEFAULT_NODE_64_HEX


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
