"""
Schemas
File: proof.py

Purpose: JSON envelope for a single sparse Merkle proof, so a proof can be
handed to a verifier together with the parameters it is valid against
(depth, hash algorithm, index, leaf and root).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.crypto.hashing import HASH_SIZE, bytes_to_hex, hex_to_bytes


class ProofEnvelope(BaseModel):
    """
    A proof plus everything needed to check it.

    Byte fields are lowercase hex without prefix. The leaf is the
    claimed leaf value; for an index holding no leaf it is the level-0
    default node. The root is always HASH_SIZE bytes.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    depth: int = Field(..., description="Tree depth the proof was generated for", ge=1)
    hash_algorithm: str = Field(default="sha256", description="Name of the hash function")
    index: int = Field(..., description="Sparse index of the proven position", ge=0)
    leaf: str = Field(default="", description="Hex of the leaf value")
    root: str = Field(..., description="Hex of the tree root")
    proof: str = Field(..., description="Hex of the encoded proof")

    @field_validator("leaf", "proof")
    @classmethod
    def validate_hex(cls, v: str) -> str:
        """Ensure byte fields are decodable hex; normalize to lowercase."""
        hex_to_bytes(v)
        return v.lower().removeprefix("0x")

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: str) -> str:
        """Ensure the root is a fixed-width digest."""
        if len(hex_to_bytes(v)) != HASH_SIZE:
            raise ValueError(f"root must encode {HASH_SIZE} bytes")
        return v.lower().removeprefix("0x")

    @property
    def leaf_bytes(self) -> bytes:
        return hex_to_bytes(self.leaf)

    @property
    def root_bytes(self) -> bytes:
        return hex_to_bytes(self.root)

    @property
    def proof_bytes(self) -> bytes:
        return hex_to_bytes(self.proof)

    @classmethod
    def from_bytes(
        cls,
        depth: int,
        index: int,
        leaf: bytes,
        root: bytes,
        proof: bytes,
        hash_algorithm: str = "sha256",
    ) -> "ProofEnvelope":
        """Build an envelope from raw byte values."""
        return cls(
            depth=depth,
            hash_algorithm=hash_algorithm,
            index=index,
            leaf=bytes_to_hex(leaf),
            root=bytes_to_hex(root),
            proof=bytes_to_hex(proof),
        )
