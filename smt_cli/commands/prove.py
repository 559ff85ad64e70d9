"""
CLI Prove Command

Build a sparse Merkle tree from a leaves file and emit the proof for one
index as a ProofEnvelope.

Usage:
    smt prove leaves.json 303 [--out proof.json] [--json]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.merkle.merkle_proofs import SparseMerkleProver
from core.schemas.errors import SMTException
from core.schemas.proof import ProofEnvelope
from smt_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    load_leaves,
    parse_index,
    resolve_leaf_encoding,
    resolve_tree_config,
)


logger = logging.getLogger(__name__)


def print_envelope_human(envelope: ProofEnvelope) -> None:
    """Print a proof envelope in human-readable format."""
    print(f"depth: {envelope.depth}")
    print(f"hash: {envelope.hash_algorithm}")
    print(f"index: {envelope.index}")
    print(f"leaf: {envelope.leaf}")
    print(f"root: {envelope.root}")
    print(f"proof: {envelope.proof}")


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    leaves_path = Path(args.leaves_file)

    try:
        tree_config = resolve_tree_config(args)
        index = parse_index(args.index)
        leaves = load_leaves(leaves_path, resolve_leaf_encoding(args))
        prover = SparseMerkleProver(leaves, tree_config)
        envelope = prover.prove_envelope(index)
    except (SMTException, ValueError, IndexError, OSError) as e:
        if getattr(args, "debug", False):
            raise
        print(f"Error generating proof: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if index not in prover.tree.leaves:
        logger.warning("Index %d holds no leaf; emitting a non-membership proof", index)

    payload = envelope.model_dump_json(indent=2)
    if args.out:
        out_path = Path(args.out)
        out_path.write_text(payload + "\n", encoding="utf-8")
        logger.info("Wrote proof for index %d to %s", index, out_path)

    if args.json:
        print(payload)
    elif not args.out:
        print_envelope_human(envelope)
    else:
        print(f"proof written: {args.out}")

    return EXIT_SUCCESS
