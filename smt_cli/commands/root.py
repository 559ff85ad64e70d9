"""
CLI Root Command

Build a sparse Merkle tree from a leaves file and print its root.

Usage:
    smt root leaves.json [--depth N] [--hash ALG] [--leaf-encoding hex|utf8] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any

from core.merkle.sparse_merkle_tree import SparseMerkleTree
from core.schemas.errors import SMTException
from smt_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    load_leaves,
    resolve_leaf_encoding,
    resolve_tree_config,
)


logger = logging.getLogger(__name__)


@dataclass
class RootSummary:
    """Summary of a tree build for CLI output."""
    leaves_path: str = ""
    depth: int = 0
    hash_algorithm: str = ""
    leaf_count: int = 0
    node_count: int = 0
    root: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def print_summary_human(summary: RootSummary) -> None:
    """Print summary in human-readable format."""
    print(f"leaves: {summary.leaves_path}")
    print(f"depth: {summary.depth}")
    print(f"hash: {summary.hash_algorithm}")
    print(f"leaf_count: {summary.leaf_count}")
    print(f"node_count: {summary.node_count}")
    print(f"root: {summary.root}")


def root_cmd(args: Namespace) -> int:
    """
    Execute the root command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    leaves_path = Path(args.leaves_file)

    try:
        tree_config = resolve_tree_config(args)
        leaves = load_leaves(leaves_path, resolve_leaf_encoding(args))
        tree = SparseMerkleTree.build(leaves, tree_config.depth, tree_config.hash_fn)
    except (SMTException, ValueError, OSError) as e:
        if getattr(args, "debug", False):
            raise
        print(f"Error building tree: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = RootSummary(
        leaves_path=str(leaves_path),
        depth=tree.depth,
        hash_algorithm=tree_config.hash_algorithm,
        leaf_count=len(tree),
        node_count=tree.node_count,
        root=tree.root_hex(),
    )
    logger.info("Built tree from %s: root=%s", leaves_path, summary.root)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS
