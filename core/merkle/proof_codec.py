"""
Sparse Merkle Proof Codec
Compact encoding of the sibling path for one index.

Proof format:

proof: bitmask 8 body [ignored trailing bytes]
bitmask: big-endian uint64, bit L set iff the level-L sibling is non-default
body: one sibling per set bit, in level order 0..depth-1

Every sibling above the leaves is a 32-byte node. The level-0 sibling is a
leaf value and keeps its own width (1..32 bytes): it takes 32 bytes when the
body is long enough, otherwise whatever the 32-byte siblings above it leave.

Default siblings are omitted from the body and rebuilt from the
default-node table during verification. Bits at or above depth are never
read. A tree with no leaves produces EMPTY_TREE_PROOF (32 zero bytes),
which decodes as an all-default path.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from core.crypto.hashing import HASH_SIZE, ensure_hash_value
from core.schemas.errors import MalformedProofException


BITMASK_SIZE: int = 8

# Widest leaf the level-0 sibling slot can carry
MAX_LEAF_SIZE: int = HASH_SIZE

# Returned by generate_proof for a tree with no leaves
EMPTY_TREE_PROOF: bytes = bytes(32)


def max_proof_length(depth: int) -> int:
    """Upper bound on an encoded proof: bitmask plus one sibling per level."""
    return BITMASK_SIZE + HASH_SIZE * depth


@dataclass(frozen=True)
class DecodedProof:
    """
    A decoded sparse Merkle proof.

    Attributes:
        bitmask: Bit L is set iff siblings holds the level-L sibling
        siblings: Non-default sibling values, lowest level first
    """
    bitmask: int
    siblings: tuple[bytes, ...]

    def has_sibling(self, level: int) -> bool:
        return (self.bitmask >> level) & 1 == 1


def _popcount(value: int) -> int:
    return bin(value).count("1")


def encode_proof(bitmask: int, siblings: Sequence[bytes]) -> bytes:
    """
    Encode a bitmask and its non-default siblings.

    Raises:
        ValueError: If the bitmask does not fit in 64 bits, its popcount
            differs from the number of siblings, the level-0 sibling is not
            1..32 bytes, or any other sibling is not 32 bytes
    """
    if not 0 <= bitmask < (1 << (8 * BITMASK_SIZE)):
        raise ValueError(f"bitmask does not fit in {BITMASK_SIZE} bytes: {bitmask}")
    if _popcount(bitmask) != len(siblings):
        raise ValueError(
            f"bitmask marks {_popcount(bitmask)} siblings, got {len(siblings)}"
        )

    parts = [bitmask.to_bytes(BITMASK_SIZE, "big")]
    for position, sibling in enumerate(siblings):
        if position == 0 and bitmask & 1:
            if not 1 <= len(sibling) <= MAX_LEAF_SIZE:
                raise ValueError(
                    f"leaf sibling must be 1..{MAX_LEAF_SIZE} bytes, got {len(sibling)}"
                )
            parts.append(bytes(sibling))
        else:
            parts.append(ensure_hash_value(sibling, "sibling"))
    return b"".join(parts)


def decode_proof(proof: bytes, depth: int) -> DecodedProof:
    """
    Decode a proof for a tree of the given depth.

    Every slice is bounds-checked; nothing is read past the end of proof.
    Bytes after the last sibling are ignored.

    Raises:
        MalformedProofException: If the proof is longer than
            max_proof_length(depth), shorter than its bitmask, or its body
            is too short for the siblings the bitmask claims
    """
    length = len(proof)
    if length > max_proof_length(depth):
        raise MalformedProofException(
            f"Proof of {length} bytes exceeds the {max_proof_length(depth)}-byte "
            f"limit for depth {depth}",
            proof_length=length,
        )
    if length < BITMASK_SIZE:
        raise MalformedProofException(
            f"Proof of {length} bytes is shorter than the {BITMASK_SIZE}-byte bitmask",
            proof_length=length,
        )

    bitmask = int.from_bytes(proof[:BITMASK_SIZE], "big")
    used = bitmask & ((1 << depth) - 1)
    count = _popcount(used)
    body_length = length - BITMASK_SIZE

    widths = [HASH_SIZE] * count
    if used & 1 and body_length < count * HASH_SIZE:
        widths[0] = body_length - (count - 1) * HASH_SIZE
    if sum(widths) > body_length or (widths and widths[0] < 1):
        raise MalformedProofException(
            f"Proof body holds {body_length} bytes, too short for the "
            f"{count} siblings its bitmask claims",
            proof_length=length,
            details={"bitmask": f"{bitmask:016x}"},
        )

    siblings = []
    offset = BITMASK_SIZE
    for width in widths:
        siblings.append(bytes(proof[offset:offset + width]))
        offset += width
    return DecodedProof(bitmask=used, siblings=tuple(siblings))


__all__ = [
    "BITMASK_SIZE",
    "MAX_LEAF_SIZE",
    "EMPTY_TREE_PROOF",
    "DecodedProof",
    "max_proof_length",
    "encode_proof",
    "decode_proof",
]
