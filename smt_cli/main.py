"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m smt_cli root <leaves.json> [--depth N] [--hash ALG] [--json]
    python -m smt_cli prove <leaves.json> <index> [--out PATH] [--json]
    python -m smt_cli verify --proof-file <proof.json> [--json] [--debug]
    python -m smt_cli verify <index> <leaf> <root> <proof> [--depth N] [--hash ALG]
    python -m smt_cli config --init

Environment Variables:
    SMT_DEPTH            Tree depth (default: 64)
    SMT_HASH_ALGORITHM   Hash function: sha256, sha3_256, blake2s, blake2b_256
    SMT_LEAF_ENCODING    Leaf value encoding in inputs: hex or utf8
    SMT_LOG_LEVEL        Log level (default: WARNING)
    SMT_LOG_FILE         Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.crypto.hashing import HASH_FUNCTIONS
from smt_cli import __version__
from smt_cli.commands import root, prove, verify
from smt_cli.commands.common import EXIT_RUNTIME_ERROR, EXIT_SUCCESS
from smt_cli.config import LEAF_ENCODINGS, get_default_config_template, load_config


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.WARNING)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_tree_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--depth",
        type=int,
        default=None,
        help="Tree depth (default: from config or 64)",
    )
    parser.add_argument(
        "--hash",
        type=str,
        choices=sorted(HASH_FUNCTIONS),
        default=None,
        help="Hash algorithm (default: from config or sha256)",
    )
    parser.add_argument(
        "--leaf-encoding",
        dest="leaf_encoding",
        type=str,
        choices=LEAF_ENCODINGS,
        default=None,
        help="Encoding of leaf values in the input (default: from config or hex)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Show tracebacks and detailed checks",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="smt",
        description="Sparse Merkle tree CLI - Build trees, generate proofs and verify them.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to a JSON or YAML configuration file (default: ./smt.json, ./smt.yaml or ~/.config/smt/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Build a tree from a leaves file and print its root",
        description="Build a sparse Merkle tree from a JSON leaves file.",
    )
    root_parser.add_argument(
        "leaves_file",
        type=str,
        help="JSON object mapping index to leaf value",
    )
    _add_tree_arguments(root_parser)
    root_parser.set_defaults(func=root.root_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Generate a proof for one index",
        description="Build the tree and emit a proof envelope for INDEX.",
    )
    prove_parser.add_argument(
        "leaves_file",
        type=str,
        help="JSON object mapping index to leaf value",
    )
    prove_parser.add_argument(
        "index",
        type=str,
        help="Index to prove (decimal or 0x hex)",
    )
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the proof envelope (JSON) to this path",
    )
    _add_tree_arguments(prove_parser)
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a proof against a root",
        description="Verify a proof envelope file, or INDEX LEAF ROOT PROOF given inline.",
    )
    verify_parser.add_argument("index", type=str, nargs="?", default=None, help="Index (decimal or 0x hex)")
    verify_parser.add_argument("leaf", type=str, nargs="?", default=None, help="Leaf value (empty for default)")
    verify_parser.add_argument("root", type=str, nargs="?", default=None, help="Root (hex)")
    verify_parser.add_argument("proof", type=str, nargs="?", default=None, help="Proof (hex)")
    verify_parser.add_argument(
        "--proof-file", "-p",
        dest="proof_file",
        type=str,
        default=None,
        help="Proof envelope JSON written by 'smt prove --out'",
    )
    _add_tree_arguments(verify_parser)
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="smt.json",
        help="Path for config file (default: smt.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (SMT_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: smt config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    # JSON output by default if configured
    if hasattr(args, "json") and config.default_output_format == "json":
        args.json = True

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if hasattr(args, "debug") and args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
