"""
CLI command modules.
"""

from smt_cli.commands import root, prove, verify

__all__ = ["root", "prove", "verify"]
