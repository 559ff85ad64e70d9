"""
Runtime Configuration Module

Provides tree configuration loading for the sparse Merkle tree.
"""

from .runtime import TreeConfig

__all__ = [
    "TreeConfig",
]
