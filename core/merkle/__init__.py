"""
Sparse Merkle Tree and Proofs
Fixed-depth sparse Merkle tree construction + proof generation/verification.

This module provides:
- SparseMerkleTree: Build a tree from {index: leaf}, read its root, make proofs
- verify_proof: Check a proof against a root without the tree
- build_default_nodes: The per-level default-node table
- encode_proof / decode_proof: The compact bitmask proof format
- SparseMerkleProver / SparseMerkleVerifier: Convenience classes

Commitment Rules:
1. Default nodes: DN[0] = H(32 zero bytes), DN[i] = H(DN[i-1] + DN[i-1])
2. Parent hashing: H(left + right); a missing sibling is DN[level]
3. Empty tree: root = DN[depth]
4. Proof: 8-byte big-endian presence bitmask + present siblings

Usage:
    from core.merkle import SparseMerkleTree, verify_proof
    from core.crypto import sha256

    tree = SparseMerkleTree.build({101: b"tx1", 303: b"tx3"}, depth=64)
    proof = tree.generate_proof(303)

    # Verify without the tree
    assert verify_proof(64, sha256, 303, b"tx3", tree.root, proof)
"""
from .default_nodes import (
    DEFAULT_SMT_DEPTH,
    MAX_SMT_DEPTH,
    ZERO_LEAF,
    build_default_nodes,
)

from .level_map import SparseLevelMap

from .proof_codec import (
    BITMASK_SIZE,
    MAX_LEAF_SIZE,
    EMPTY_TREE_PROOF,
    DecodedProof,
    max_proof_length,
    encode_proof,
    decode_proof,
)

from .sparse_merkle_tree import (
    SparseMerkleTree,
    build_levels,
    validate_depth,
    compute_root_from_proof,
    verify_proof,
    verify_proof_detailed,
)

from .merkle_proofs import (
    SparseMerkleProver,
    SparseMerkleVerifier,
)


__all__ = [
    # Constants
    "DEFAULT_SMT_DEPTH",
    "MAX_SMT_DEPTH",
    "ZERO_LEAF",
    "BITMASK_SIZE",
    "MAX_LEAF_SIZE",
    "EMPTY_TREE_PROOF",
    # Core types
    "SparseLevelMap",
    "SparseMerkleTree",
    "DecodedProof",
    # Core functions
    "build_default_nodes",
    "build_levels",
    "validate_depth",
    "max_proof_length",
    "encode_proof",
    "decode_proof",
    "compute_root_from_proof",
    "verify_proof",
    "verify_proof_detailed",
    # Convenience classes
    "SparseMerkleProver",
    "SparseMerkleVerifier",
]
