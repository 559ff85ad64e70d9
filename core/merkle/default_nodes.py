"""
Default-Node Table
Precomputed "nothing here" hashes, one per tree level.

DN[0] = hash(32 zero bytes)
DN[i] = hash(DN[i-1] + DN[i-1])

DN[i] is the root of a fully-default subtree of height i, so sparse level
maps never need to store default entries explicitly.
"""
from __future__ import annotations

from core.crypto.hashing import HASH_SIZE, HashFunction, hash_concat, sha256, ensure_hash_value


# Depth used when none is given
DEFAULT_SMT_DEPTH: int = 64

# The proof bitmask is 8 bytes, one bit per level
MAX_SMT_DEPTH: int = 64

# Input to DN[0]
ZERO_LEAF: bytes = bytes(HASH_SIZE)


def build_default_nodes(depth: int, hash_fn: HashFunction = sha256) -> list[bytes]:
    """
    Build the default-node table for a tree of the given depth.

    Args:
        depth: Number of levels above the leaves
        hash_fn: Hash function producing 32-byte digests

    Returns:
        List of depth + 1 digests, indexed by level

    Example:
        >>> nodes = build_default_nodes(2)
        >>> len(nodes)
        3
        >>> nodes[1] == sha256(nodes[0] + nodes[0])
        True
    """
    default_nodes = [ensure_hash_value(hash_fn(ZERO_LEAF), "hash function output")]
    for level in range(1, depth + 1):
        previous = default_nodes[level - 1]
        default_nodes.append(hash_concat(previous, previous, hash_fn))
    return default_nodes


__all__ = [
    "DEFAULT_SMT_DEPTH",
    "MAX_SMT_DEPTH",
    "ZERO_LEAF",
    "build_default_nodes",
]
