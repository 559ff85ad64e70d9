"""
Core cryptographic utilities.

Provides the fixed-width hash functions and hex helpers used by the
sparse Merkle tree.
"""
from .hashing import (
    HASH_SIZE,
    HashFunction,
    HASH_FUNCTIONS,
    sha256,
    sha3_256,
    blake2s,
    blake2b_256,
    get_hash_function,
    ensure_hash_value,
    hash_concat,
    bytes_to_hex,
    hex_to_bytes,
    hex_to_index,
)

__all__ = [
    "HASH_SIZE",
    "HashFunction",
    "HASH_FUNCTIONS",
    "sha256",
    "sha3_256",
    "blake2s",
    "blake2b_256",
    "get_hash_function",
    "ensure_hash_value",
    "hash_concat",
    "bytes_to_hex",
    "hex_to_bytes",
    "hex_to_index",
]
