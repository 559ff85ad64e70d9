"""
Sparse Merkle Tree Implementation
Fixed-depth binary hash tree over a sparse integer index space.

This module provides:
- Bottom-up construction of per-level sparse node maps from a leaf set
- Root computation (the top default node for an empty tree)
- Compact proof generation for any index
- Proof verification that needs only depth, hash function and default nodes

Commitment Rules (Hard Contracts):
1. Default nodes: DN[0] = hash(32 zero bytes), DN[i] = hash(DN[i-1] + DN[i-1])
2. Parent hashing: parent = hash(left + right)
3. Missing sibling at level L is DN[L]
4. Even index i computes the parent of (i, i+1); odd index i only does so
   when i-1 is absent, so every parent is computed exactly once
5. Empty tree: root = DN[depth]
6. Leaves are caller-supplied bytes (already hashed, 1..32 bytes, not
   re-hashed); every node above the leaves is exactly 32 bytes

Determinism Notes:
- Leaf insertion order does not affect the root
- Levels are walked in ascending index order
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, Sequence

from core.crypto.hashing import (
    HASH_SIZE,
    HashFunction,
    bytes_to_hex,
    hash_concat,
    sha256,
)
from core.merkle.default_nodes import DEFAULT_SMT_DEPTH, MAX_SMT_DEPTH, build_default_nodes
from core.merkle.level_map import SparseLevelMap
from core.merkle.proof_codec import EMPTY_TREE_PROOF, MAX_LEAF_SIZE, decode_proof, encode_proof
from core.schemas.errors import (
    ErrorCodes,
    MalformedProofException,
    SMTError,
    TreeConstructionException,
)
from core.schemas.verification import CheckResult, VerificationResult


logger = logging.getLogger(__name__)


def validate_depth(depth: int) -> int:
    """
    Check that depth is a usable tree depth.

    Raises:
        TreeConstructionException: If depth is not an int in 1..MAX_SMT_DEPTH
    """
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise TreeConstructionException(
            f"Tree depth must be an integer, got {type(depth).__name__}",
            details={"depth": repr(depth)},
        )
    if depth < 1:
        raise TreeConstructionException(
            f"Tree depth must be positive, got {depth}",
            details={"depth": depth},
        )
    if depth > MAX_SMT_DEPTH:
        raise TreeConstructionException(
            f"Tree depth {depth} exceeds the {MAX_SMT_DEPTH} levels a proof bitmask can address",
            details={"depth": depth, "max_depth": MAX_SMT_DEPTH},
        )
    return depth


def _validate_leaves(leaves: Mapping[int, bytes], depth: int) -> dict[int, bytes]:
    capacity = 1 << depth
    validated: dict[int, bytes] = {}
    for index, value in leaves.items():
        if isinstance(index, bool) or not isinstance(index, int):
            raise TreeConstructionException(
                f"Leaf index must be an integer, got {type(index).__name__}",
                code=ErrorCodes.INDEX_OUT_OF_RANGE,
                details={"index": repr(index)},
            )
        if not 0 <= index < capacity:
            raise TreeConstructionException(
                f"Leaf index {index} out of range for depth {depth}",
                code=ErrorCodes.INDEX_OUT_OF_RANGE,
                details={"index": index, "depth": depth},
            )
        if not isinstance(value, (bytes, bytearray)):
            raise TreeConstructionException(
                f"Leaf value at index {index} must be bytes, got {type(value).__name__}",
                code=ErrorCodes.INVALID_LEAF,
                details={"index": index},
            )
        if not 1 <= len(value) <= MAX_LEAF_SIZE:
            raise TreeConstructionException(
                f"Leaf value at index {index} must be 1..{MAX_LEAF_SIZE} bytes, got {len(value)}",
                code=ErrorCodes.INVALID_LEAF,
                details={"index": index, "length": len(value)},
            )
        validated[index] = bytes(value)
    return validated


def build_levels(
    leaves: Mapping[int, bytes],
    depth: int,
    default_nodes: Sequence[bytes],
    hash_fn: HashFunction = sha256,
) -> list[SparseLevelMap]:
    """
    Build all depth + 1 sparse levels from the leaf level.

    Algorithm, producing level L+1 from level L:
    - Even index i: parent(i // 2) = hash(v_i + (v_{i+1} or DN[L]))
    - Odd index i with i-1 absent: parent(i // 2) = hash(DN[L] + v_i)
    - Odd index i with i-1 present: skipped, already emitted by i-1

    Args:
        leaves: Non-empty mapping of leaf index to leaf value
        depth: Number of levels above the leaves
        default_nodes: Default-node table for depth and hash_fn
        hash_fn: Hash function

    Returns:
        List of SparseLevelMap, index 0 is the leaf level, index depth holds the root
    """
    current = SparseLevelMap(leaves)
    levels = [current]

    for level in range(depth):
        default = default_nodes[level]
        parents = SparseLevelMap()
        for index, value in current.items():
            if index & 1 == 0:
                sibling = current.get(index + 1)
                right = sibling if sibling is not None else default
                parents.set(index >> 1, hash_concat(value, right, hash_fn))
            elif not current.contains(index - 1):
                parents.set(index >> 1, hash_concat(default, value, hash_fn))
        levels.append(parents)
        current = parents

    return levels


class SparseMerkleTree:
    """
    Sparse Merkle tree built once from a complete leaf set.

    Everything is computed at construction; the tree is read-only afterwards
    and safe to share between readers.

    Example:
        >>> tree = SparseMerkleTree.build({101: b"tx1", 303: b"tx3"}, depth=64)
        >>> proof = tree.generate_proof(303)
        >>> tree.verify(303, b"tx3", tree.root, proof)
        True
    """

    def __init__(
        self,
        leaves: Mapping[int, bytes] | None = None,
        depth: int = DEFAULT_SMT_DEPTH,
        hash_fn: HashFunction = sha256,
    ) -> None:
        self._depth = validate_depth(depth)
        self._hash_fn = hash_fn
        self._leaves = _validate_leaves(leaves or {}, self._depth)
        self._default_nodes = tuple(build_default_nodes(self._depth, hash_fn))

        if self._leaves:
            self._levels = tuple(
                build_levels(self._leaves, self._depth, self._default_nodes, hash_fn)
            )
            _, self._root = self._levels[self._depth].only_item()
        else:
            self._levels = ()
            self._root = self._default_nodes[self._depth]

        logger.debug(
            "Built sparse Merkle tree: depth=%d leaves=%d nodes=%d root=%s",
            self._depth,
            len(self._leaves),
            self.node_count,
            bytes_to_hex(self._root),
        )

    @classmethod
    def build(
        cls,
        leaves: Mapping[int, bytes],
        depth: int = DEFAULT_SMT_DEPTH,
        hash_fn: HashFunction = sha256,
    ) -> "SparseMerkleTree":
        """
        Build a tree from a leaf set.

        Raises:
            TreeConstructionException: On invalid depth, index or leaf value
        """
        return cls(leaves, depth, hash_fn)

    @classmethod
    def build_empty(
        cls,
        depth: int = DEFAULT_SMT_DEPTH,
        hash_fn: HashFunction = sha256,
    ) -> "SparseMerkleTree":
        """
        Build a tree with no leaves; its root is the top default node.

        Also serves as a reference verifier for proofs from other trees of
        the same depth and hash function.
        """
        return cls({}, depth, hash_fn)

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def hash_fn(self) -> HashFunction:
        return self._hash_fn

    @property
    def default_nodes(self) -> tuple[bytes, ...]:
        return self._default_nodes

    @property
    def leaves(self) -> Mapping[int, bytes]:
        """Read-only view of the leaf set."""
        return MappingProxyType(self._leaves)

    @property
    def levels(self) -> tuple[SparseLevelMap, ...]:
        """Sparse level maps, leaves first; empty for a tree with no leaves."""
        return self._levels

    @property
    def root(self) -> bytes:
        """32-byte root."""
        return self._root

    @property
    def is_empty(self) -> bool:
        return not self._leaves

    @property
    def node_count(self) -> int:
        """Number of explicitly stored (non-default) nodes across all levels."""
        return sum(len(level) for level in self._levels)

    def root_bytes(self) -> bytes:
        return self._root

    def root_hex(self) -> str:
        """Lowercase hex of the 32-byte root."""
        return bytes_to_hex(self._root)

    def get_node(self, level: int, index: int) -> bytes:
        """
        Value of the node at (level, index), falling back to the default node.

        Raises:
            IndexError: If level is outside 0..depth
        """
        if not 0 <= level <= self._depth:
            raise IndexError(f"Level {level} out of range for depth {self._depth}")
        if self._levels:
            value = self._levels[level].get(index)
            if value is not None:
                return value
        return self._default_nodes[level]

    def generate_proof(self, index: int) -> bytes:
        """
        Generate the proof for the node at a leaf index.

        For each level L, the sibling of the current position is looked up;
        if it is stored, bit L of the bitmask is set and its value appended.

        Args:
            index: Leaf index in [0, 2**depth)

        Returns:
            Encoded proof (8-byte bitmask + present siblings), or
            EMPTY_TREE_PROOF if the tree has no leaves

        Raises:
            IndexError: If index is out of range
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"Index must be an integer, got {type(index).__name__}")
        if not 0 <= index < (1 << self._depth):
            raise IndexError(f"Index {index} out of range for depth {self._depth}")

        if not self._levels:
            return EMPTY_TREE_PROOF

        bitmask = 0
        siblings: list[bytes] = []
        position = index
        for level in range(self._depth):
            sibling_index = position + 1 if position & 1 == 0 else position - 1
            sibling = self._levels[level].get(sibling_index)
            if sibling is not None:
                siblings.append(sibling)
                bitmask |= 1 << level
            position >>= 1

        proof = encode_proof(bitmask, siblings)
        logger.debug(
            "Generated proof for index %d: %d non-default siblings, %d bytes",
            index,
            len(siblings),
            len(proof),
        )
        return proof

    def verify(self, index: int, leaf_hash: bytes, root: bytes, proof: bytes) -> bool:
        """Verify a proof using this tree's depth, hash function and default nodes."""
        return verify_proof(
            self._depth,
            self._hash_fn,
            index,
            leaf_hash,
            root,
            proof,
            default_nodes=self._default_nodes,
        )

    def __len__(self) -> int:
        return len(self._leaves)

    def __repr__(self) -> str:
        return (
            f"SparseMerkleTree(depth={self._depth}, leaves={len(self._leaves)}, "
            f"root={self.root_hex()})"
        )


def compute_root_from_proof(
    depth: int,
    hash_fn: HashFunction,
    index: int,
    leaf_hash: bytes,
    proof: bytes,
    default_nodes: Sequence[bytes] | None = None,
) -> bytes:
    """
    Recompute the root implied by a proof.

    An empty leaf_hash starts from DN[depth].

    Raises:
        MalformedProofException: If the proof cannot be decoded
    """
    if default_nodes is None:
        default_nodes = build_default_nodes(depth, hash_fn)
    decoded = decode_proof(proof, depth)

    current = leaf_hash if len(leaf_hash) > 0 else default_nodes[depth]
    siblings = iter(decoded.siblings)
    position = index
    for level in range(depth):
        if decoded.has_sibling(level):
            sibling = next(siblings)
        else:
            sibling = default_nodes[level]
        if position & 1 == 0:
            current = hash_concat(current, sibling, hash_fn)
        else:
            current = hash_concat(sibling, current, hash_fn)
        position >>= 1
    return current


def verify_proof_detailed(
    depth: int,
    hash_fn: HashFunction,
    index: int,
    leaf_hash: bytes,
    root: bytes,
    proof: bytes,
    default_nodes: Sequence[bytes] | None = None,
) -> VerificationResult:
    """
    Verify a proof and report why it failed.

    Args:
        depth: Tree depth the proof was generated for
        hash_fn: Hash function of that tree
        index: Claimed leaf index
        leaf_hash: Claimed leaf value; empty claims the default at this index
        root: 32-byte root to check against
        proof: Encoded proof
        default_nodes: Precomputed default-node table (built if omitted)

    Returns:
        VerificationResult; error.code is MALFORMED_PROOF, INDEX_OUT_OF_RANGE
        or ROOT_MISMATCH on failure

    Raises:
        TreeConstructionException: If depth itself is invalid
        ValueError: If default_nodes does not have depth + 1 entries
    """
    validate_depth(depth)
    if default_nodes is not None and len(default_nodes) != depth + 1:
        raise ValueError(
            f"default_nodes must have {depth + 1} entries, got {len(default_nodes)}"
        )

    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < (1 << depth):
        message = f"Index {index!r} out of range for depth {depth}"
        return VerificationResult.failure(
            checks=[CheckResult.failed("index_in_range", message)],
            error=SMTError(code=ErrorCodes.INDEX_OUT_OF_RANGE, message=message),
        )
    checks = [CheckResult.passed("index_in_range")]

    try:
        computed = compute_root_from_proof(
            depth, hash_fn, index, bytes(leaf_hash), bytes(proof), default_nodes
        )
    except MalformedProofException as e:
        logger.debug("Rejected malformed proof for index %d: %s", index, e.message)
        checks.append(CheckResult.failed("proof_decodes", e.message, e.details))
        return VerificationResult.failure(checks=checks, error=e.to_error_model())
    checks.append(CheckResult.passed("proof_decodes"))

    computed_hex = bytes_to_hex(computed)
    if len(root) != HASH_SIZE or computed != bytes(root):
        message = f"Computed root {computed_hex} does not match {bytes_to_hex(root)}"
        checks.append(CheckResult.failed("root_matches", message))
        return VerificationResult.failure(
            checks=checks,
            error=SMTError(
                code=ErrorCodes.ROOT_MISMATCH,
                message=message,
                details={"index": index},
            ),
            computed_root=computed_hex,
        )
    checks.append(CheckResult.passed("root_matches"))
    return VerificationResult.success(checks=checks, computed_root=computed_hex)


def verify_proof(
    depth: int,
    hash_fn: HashFunction,
    index: int,
    leaf_hash: bytes,
    root: bytes,
    proof: bytes,
    default_nodes: Sequence[bytes] | None = None,
) -> bool:
    """
    Verify a proof against a root.

    Independent of the tree that generated the proof; only depth, hash
    function and the default-node table need to match.

    Returns:
        True iff the proof is well-formed and reproduces root
    """
    return verify_proof_detailed(
        depth, hash_fn, index, leaf_hash, root, proof, default_nodes
    ).ok


__all__ = [
    "SparseMerkleTree",
    "build_levels",
    "validate_depth",
    "compute_root_from_proof",
    "verify_proof",
    "verify_proof_detailed",
]
