"""
Sparse Merkle Proofs Convenience Wrappers
Class-based interfaces around the functions in sparse_merkle_tree.py.

This module provides:
- SparseMerkleProver: Build a tree and emit proofs / proof envelopes
- SparseMerkleVerifier: Reference verifier holding only depth, hash
  function and default-node table
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Mapping

from core.crypto.hashing import HashFunction, sha256
from core.merkle.default_nodes import DEFAULT_SMT_DEPTH, build_default_nodes
from core.merkle.sparse_merkle_tree import (
    SparseMerkleTree,
    validate_depth,
    verify_proof_detailed,
)
from core.schemas.errors import ErrorCodes, MalformedProofException, VerificationMismatchException
from core.schemas.proof import ProofEnvelope
from core.schemas.verification import VerificationResult

if TYPE_CHECKING:
    from core.config.runtime import TreeConfig


logger = logging.getLogger(__name__)


class SparseMerkleProver:
    """
    Convenience class for generating sparse Merkle proofs.

    Example:
        >>> prover = SparseMerkleProver({303: b"tx3"}, TreeConfig(depth=16))
        >>> envelope = prover.prove_envelope(303)
        >>> envelope.root == prover.tree.root_hex()
        True
    """

    def __init__(
        self,
        leaves: Mapping[int, bytes],
        config: TreeConfig | None = None,
    ) -> None:
        if config is None:
            from core.config.runtime import TreeConfig
            config = TreeConfig()
        self.config = config
        self.tree = SparseMerkleTree.build(leaves, self.config.depth, self.config.hash_fn)

    @staticmethod
    def prove(
        leaves: Mapping[int, bytes],
        index: int,
        depth: int = DEFAULT_SMT_DEPTH,
        hash_fn: HashFunction = sha256,
    ) -> bytes:
        """
        Build a tree from leaves and return the proof for one index.

        Raises:
            TreeConstructionException: If the tree cannot be built
            IndexError: If index is out of range
        """
        return SparseMerkleTree.build(leaves, depth, hash_fn).generate_proof(index)

    @staticmethod
    def compute_root(
        leaves: Mapping[int, bytes],
        depth: int = DEFAULT_SMT_DEPTH,
        hash_fn: HashFunction = sha256,
    ) -> bytes:
        """Compute the 32-byte root of a leaf set."""
        return SparseMerkleTree.build(leaves, depth, hash_fn).root

    def prove_envelope(self, index: int) -> ProofEnvelope:
        """
        Generate a proof for index and wrap it with the parameters needed to
        verify it. An index holding no leaf gets the level-0 default node as
        its leaf, so the envelope proves absence.
        """
        proof = self.tree.generate_proof(index)
        return ProofEnvelope.from_bytes(
            depth=self.tree.depth,
            index=index,
            leaf=self.tree.leaves.get(index, self.tree.default_nodes[0]),
            root=self.tree.root,
            proof=proof,
            hash_algorithm=self.config.hash_algorithm,
        )


class SparseMerkleVerifier:
    """
    Reference verifier for sparse Merkle proofs.

    Holds only what verification needs, so it can check proofs produced by
    any tree with the same depth and hash function.

    Example:
        >>> verifier = SparseMerkleVerifier(depth=64)
        >>> verifier.verify(303, b"tx3", root, proof)
        True
    """

    def __init__(
        self,
        depth: int = DEFAULT_SMT_DEPTH,
        hash_fn: HashFunction = sha256,
    ) -> None:
        self.depth = validate_depth(depth)
        self.hash_fn = hash_fn
        self.default_nodes = tuple(build_default_nodes(depth, hash_fn))

    @classmethod
    def from_config(cls, config: TreeConfig) -> "SparseMerkleVerifier":
        return cls(depth=config.depth, hash_fn=config.hash_fn)

    def verify_detailed(
        self,
        index: int,
        leaf_hash: bytes,
        root: bytes,
        proof: bytes,
    ) -> VerificationResult:
        return verify_proof_detailed(
            self.depth,
            self.hash_fn,
            index,
            leaf_hash,
            root,
            proof,
            default_nodes=self.default_nodes,
        )

    def verify(self, index: int, leaf_hash: bytes, root: bytes, proof: bytes) -> bool:
        """Return True iff proof is well-formed and reproduces root."""
        return self.verify_detailed(index, leaf_hash, root, proof).ok

    def require_valid(self, index: int, leaf_hash: bytes, root: bytes, proof: bytes) -> None:
        """
        Verify a proof, raising on failure.

        Raises:
            MalformedProofException: If the proof cannot be decoded
            VerificationMismatchException: If the proof yields another root
                or the index is out of range
        """
        result = self.verify_detailed(index, leaf_hash, root, proof)
        if result.ok:
            return
        error = result.error
        if error is not None and error.code == ErrorCodes.MALFORMED_PROOF:
            raise MalformedProofException(error.message, details=error.details)
        message = error.message if error is not None else "Proof verification failed"
        raise VerificationMismatchException(message, index=index)

    def verify_envelope(self, envelope: ProofEnvelope) -> VerificationResult:
        """
        Verify a ProofEnvelope with this verifier's parameters.

        The envelope is checked under this verifier's depth and hash
        function, never under the parameters it claims.
        """
        if envelope.depth != self.depth:
            logger.warning(
                "Envelope depth %d differs from verifier depth %d",
                envelope.depth,
                self.depth,
            )
        return self.verify_detailed(
            envelope.index,
            envelope.leaf_bytes,
            envelope.root_bytes,
            envelope.proof_bytes,
        )


__all__ = [
    "SparseMerkleProver",
    "SparseMerkleVerifier",
]
