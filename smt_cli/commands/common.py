"""
Shared helpers for CLI commands: exit codes, leaf-file parsing and tree
parameter resolution.

Leaves file format (JSON object):

    {
        "101": "747831",
        "0x12f": "747833",
        "407": "747835"
    }

Keys are sparse indices (decimal, or hex with 0x prefix); values are leaf
bytes in the selected leaf encoding ("hex" or "utf8").
"""

from __future__ import annotations

import json
from argparse import Namespace
from pathlib import Path
from typing import Any

from core.config.runtime import TreeConfig
from core.crypto.hashing import hex_to_bytes, hex_to_index


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def parse_index(value: str | int) -> int:
    """
    Parse a sparse index given as an int, a decimal string or a 0x hex string.

    Raises:
        ValueError: If the value is not a non-negative integer
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid index: {value!r}")
    if isinstance(value, int):
        index = value
    else:
        text = value.strip()
        if text[:2].lower() == "0x":
            index = hex_to_index(text)
        else:
            try:
                index = int(text, 10)
            except ValueError:
                raise ValueError(f"Invalid index: {value!r}") from None
    if index < 0:
        raise ValueError(f"Index must be non-negative, got {index}")
    return index


def decode_leaf(value: str, encoding: str) -> bytes:
    """Decode a leaf value from its textual form."""
    if encoding == "utf8":
        return value.encode("utf-8")
    if encoding == "hex":
        return hex_to_bytes(value)
    raise ValueError(f"Unknown leaf encoding: {encoding!r}")


def load_json_file(path: Path) -> Any:
    """Load and parse a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_leaves(path: Path, encoding: str = "hex") -> dict[int, bytes]:
    """
    Load a leaf set from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a JSON object, or an index or value
            cannot be parsed, or two keys name the same index
    """
    if not path.exists():
        raise FileNotFoundError(f"Leaves file not found: {path}")

    data = load_json_file(path)
    if not isinstance(data, dict):
        raise ValueError(f"Leaves file must contain a JSON object, got {type(data).__name__}")

    leaves: dict[int, bytes] = {}
    for key, value in data.items():
        if not isinstance(value, str):
            raise ValueError(f"Leaf value for {key!r} must be a string")
        index = parse_index(key)
        if index in leaves:
            raise ValueError(f"Duplicate leaf index {index} (key {key!r})")
        leaves[index] = decode_leaf(value, encoding)
    return leaves


def resolve_tree_config(args: Namespace) -> TreeConfig:
    """
    Merge --depth / --hash flags over the loaded CLI configuration.

    Raises:
        ConfigurationException: If the resulting parameters are invalid
    """
    tree = args.cli_config.tree
    depth = args.depth if getattr(args, "depth", None) is not None else tree.depth
    algorithm = getattr(args, "hash", None) or tree.hash_algorithm
    return TreeConfig(depth=depth, hash_algorithm=algorithm, extra=tree.extra)


def resolve_leaf_encoding(args: Namespace) -> str:
    return getattr(args, "leaf_encoding", None) or args.cli_config.leaf_encoding
