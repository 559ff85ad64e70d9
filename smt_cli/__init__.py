"""
Sparse Merkle Tree CLI

Command-line interface for building sparse Merkle trees, generating proofs
and verifying them.

Usage:
    python -m smt_cli root leaves.json
    python -m smt_cli prove leaves.json 303 --out proof.json
    python -m smt_cli verify --proof-file proof.json
    python -m smt_cli config --init
"""

__version__ = "0.1.0"
