"""
Hashing Utilities
Fixed-width hashing and hex helpers for sparse Merkle commitments.

This module provides:
- SHA-256 (default) and other 32-byte hash functions
- Lookup of a hash function by algorithm name
- Parent hashing over the concatenation of two nodes
- Hex encoding/decoding for bytes and sparse indices

Fixed-Width Notes:
- Every node value is exactly HASH_SIZE bytes
- Digests are never routed through int, which would drop leading zero bytes
- Only sparse indices are integers (arbitrary width)
"""
from __future__ import annotations

import hashlib
from typing import Callable


HASH_SIZE: int = 32

HashFunction = Callable[[bytes], bytes]


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def sha3_256(data: bytes) -> bytes:
    """Compute SHA3-256 hash of raw bytes."""
    return hashlib.sha3_256(data).digest()


def blake2s(data: bytes) -> bytes:
    """Compute BLAKE2s-256 hash of raw bytes."""
    return hashlib.blake2s(data).digest()


def blake2b_256(data: bytes) -> bytes:
    """Compute BLAKE2b hash of raw bytes truncated to a 32-byte digest size."""
    return hashlib.blake2b(data, digest_size=HASH_SIZE).digest()


HASH_FUNCTIONS: dict[str, HashFunction] = {
    "sha256": sha256,
    "sha3_256": sha3_256,
    "blake2s": blake2s,
    "blake2b_256": blake2b_256,
}


def get_hash_function(name: str) -> HashFunction:
    """
    Resolve a hash function by algorithm name.

    Args:
        name: One of the keys of HASH_FUNCTIONS (case-insensitive)

    Returns:
        A function mapping bytes to a 32-byte digest

    Raises:
        ValueError: If the algorithm is unknown
    """
    try:
        return HASH_FUNCTIONS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown hash algorithm: {name!r}. "
            f"Supported algorithms: {sorted(HASH_FUNCTIONS)}"
        ) from None


def ensure_hash_value(value: bytes, what: str = "hash value") -> bytes:
    """
    Check that a value is a fixed-width digest.

    Args:
        value: Candidate digest
        what: Name used in the error message

    Returns:
        The value itself, as bytes

    Raises:
        ValueError: If value is not exactly HASH_SIZE bytes
    """
    if not isinstance(value, (bytes, bytearray)) or len(value) != HASH_SIZE:
        size = len(value) if isinstance(value, (bytes, bytearray)) else type(value).__name__
        raise ValueError(f"{what} must be {HASH_SIZE} bytes, got {size}")
    return bytes(value)


def hash_concat(left: bytes, right: bytes, hash_fn: HashFunction = sha256) -> bytes:
    """
    Hash the concatenation of two byte sequences.

    This is used for computing Merkle parent hashes:
    parent = hash_fn(left + right)

    Args:
        left: Left child value
        right: Right child value
        hash_fn: Hash function (defaults to SHA-256)

    Returns:
        32-byte digest of the concatenation
    """
    return ensure_hash_value(hash_fn(left + right), "hash function output")


def bytes_to_hex(data: bytes) -> str:
    """
    Convert bytes to a lowercase hex string without prefix.

    Example:
        >>> bytes_to_hex(b"\\x00\\x0f")
        '000f'
    """
    return bytes(data).hex()


def _strip_hex_prefix(hex_string: str) -> str:
    hex_string = hex_string.strip()
    if hex_string[:2].lower() == "0x":
        return hex_string[2:]
    return hex_string


def hex_to_bytes(hex_string: str) -> bytes:
    """
    Convert a hex string (optional 0x prefix) to bytes.

    Leading zero bytes are preserved: "0000ff" decodes to three bytes.

    Raises:
        ValueError: If the string has odd length or invalid characters
    """
    hex_content = _strip_hex_prefix(hex_string)

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length, got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def hex_to_index(hex_string: str) -> int:
    """
    Convert a hex string (optional 0x prefix) to a non-negative sparse index.

    Unlike hex_to_bytes, odd lengths are accepted ("f" is 15).

    Example:
        >>> hex_to_index("77f11422ec16e11c")
        8642711300123058460

    Raises:
        ValueError: If the string is empty or has invalid characters
    """
    hex_content = _strip_hex_prefix(hex_string)
    if not hex_content:
        raise ValueError("Hex index string is empty")
    try:
        return int(hex_content, 16)
    except ValueError as e:
        raise ValueError(f"Invalid hex index {hex_string!r}: {e}") from e


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
