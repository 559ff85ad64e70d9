"""
CLI Verify Command

Verify a sparse Merkle proof against a root, without the tree.

Usage:
    smt verify --proof-file proof.json [--json] [--debug]
    smt verify INDEX LEAF ROOT PROOF [--depth N] [--hash ALG] [--leaf-encoding hex|utf8]

LEAF may be an empty string to check the default value at INDEX.
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from core.config.runtime import TreeConfig
from core.crypto.hashing import hex_to_bytes
from core.merkle.merkle_proofs import SparseMerkleVerifier
from core.schemas.errors import SMTException
from core.schemas.proof import ProofEnvelope
from core.schemas.verification import VerificationResult
from smt_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    decode_leaf,
    parse_index,
    resolve_leaf_encoding,
    resolve_tree_config,
)


logger = logging.getLogger(__name__)


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    index: int = 0
    depth: int = 0
    hash_algorithm: str = ""
    root: str = ""
    computed_root: str | None = None
    ok: bool = False
    error_code: str | None = None
    errors: list[str] = field(default_factory=list)
    checks: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["computed_root"] is None:
            del d["computed_root"]
        if d["error_code"] is None:
            del d["error_code"]
        if not d["errors"]:
            del d["errors"]
        if not d["checks"]:
            del d["checks"]
        return d


def build_summary(
    envelope: ProofEnvelope,
    tree_config: TreeConfig,
    result: VerificationResult,
    debug: bool = False,
) -> VerifySummary:
    """Build a VerifySummary from a verification result."""
    summary = VerifySummary(
        index=envelope.index,
        depth=tree_config.depth,
        hash_algorithm=tree_config.hash_algorithm,
        root=envelope.root,
        computed_root=result.computed_root,
        ok=result.ok,
        error_code=result.error.code if result.error else None,
    )
    for check in result.get_failed_checks():
        summary.errors.append(check.message)
    if debug:
        summary.checks = [
            {"check_id": c.check_id, "ok": c.ok, "message": c.message}
            for c in result.checks
        ]
    return summary


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"index: {summary.index}")
    print(f"depth: {summary.depth}")
    print(f"hash: {summary.hash_algorithm}")
    print(f"root: {summary.root}")
    if summary.computed_root is not None:
        print(f"computed_root: {summary.computed_root}")
    print(f"ok: {str(summary.ok).lower()}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors:
            print(f"  ✗ {err}")

    if summary.checks:
        print("\nchecks:")
        for check in summary.checks:
            status = "✓" if check["ok"] else "✗"
            print(f"  {status} {check['check_id']}")


def load_envelope(args: Namespace) -> tuple[ProofEnvelope, TreeConfig]:
    """
    Build the envelope and tree parameters from either --proof-file or the
    positional INDEX LEAF ROOT PROOF arguments.

    Flags (--depth, --hash) take precedence over the envelope, which takes
    precedence over the loaded configuration.
    """
    if args.proof_file:
        proof_path = Path(args.proof_file)
        if not proof_path.exists():
            raise FileNotFoundError(f"Proof file not found: {proof_path}")
        envelope = ProofEnvelope.model_validate_json(proof_path.read_text(encoding="utf-8"))
        tree_config = TreeConfig(
            depth=args.depth if args.depth is not None else envelope.depth,
            hash_algorithm=args.hash or envelope.hash_algorithm,
        )
        return envelope, tree_config

    missing = [
        name for name in ("index", "leaf", "root", "proof")
        if getattr(args, name) is None
    ]
    if missing:
        raise ValueError(
            "Either --proof-file or INDEX LEAF ROOT PROOF is required "
            f"(missing: {', '.join(missing)})"
        )

    tree_config = resolve_tree_config(args)
    envelope = ProofEnvelope.from_bytes(
        depth=tree_config.depth,
        index=parse_index(args.index),
        leaf=decode_leaf(args.leaf, resolve_leaf_encoding(args)),
        root=hex_to_bytes(args.root),
        proof=hex_to_bytes(args.proof),
        hash_algorithm=tree_config.hash_algorithm,
    )
    return envelope, tree_config


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 valid, 2 invalid, 1 on input errors)
    """
    output_json = args.json
    debug = args.debug

    try:
        envelope, tree_config = load_envelope(args)
        verifier = SparseMerkleVerifier.from_config(tree_config)
    except (SMTException, ValidationError, ValueError, OSError) as e:
        if debug:
            raise
        print(f"Error reading proof: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    result = verifier.verify_envelope(envelope)
    summary = build_summary(envelope, tree_config, result, debug=debug)

    if output_json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    if summary.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed: %s", summary.error_code)
    return EXIT_VERIFICATION_FAILED
