"""
Runtime Configuration

Tree parameters (depth and hash algorithm) shared by tree construction,
proof generation and verification. A proof is only valid against the same
depth and hash function that produced it, so both sides should load the
same TreeConfig.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from typing import Any

from dotenv import load_dotenv

from core.crypto.hashing import HASH_FUNCTIONS, HashFunction, get_hash_function
from core.merkle.default_nodes import DEFAULT_SMT_DEPTH, MAX_SMT_DEPTH
from core.schemas.errors import ConfigurationException

load_dotenv()


@dataclass
class TreeConfig:
    """
    Configuration for sparse Merkle trees.

    Can be loaded from:
    - A dictionary (e.g. a parsed config file)
    - Environment variable overrides on top of that
    - Programmatic construction
    """
    depth: int = DEFAULT_SMT_DEPTH
    hash_algorithm: str = "sha256"
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.depth, bool) or not isinstance(self.depth, int):
            raise ConfigurationException(
                f"depth must be an integer, got {type(self.depth).__name__}",
                details={"depth": repr(self.depth)},
            )
        if not 1 <= self.depth <= MAX_SMT_DEPTH:
            raise ConfigurationException(
                f"depth must be between 1 and {MAX_SMT_DEPTH}, got {self.depth}",
                details={"depth": self.depth},
            )
        if not isinstance(self.hash_algorithm, str):
            raise ConfigurationException(
                f"hash_algorithm must be a string, got {type(self.hash_algorithm).__name__}",
                details={"hash_algorithm": repr(self.hash_algorithm)},
            )
        if self.hash_algorithm.lower() not in HASH_FUNCTIONS:
            raise ConfigurationException(
                f"Unknown hash algorithm: {self.hash_algorithm!r}",
                details={"supported": sorted(HASH_FUNCTIONS)},
            )
        self.hash_algorithm = self.hash_algorithm.lower()

    @property
    def hash_fn(self) -> HashFunction:
        """Resolve the configured hash function."""
        return get_hash_function(self.hash_algorithm)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - SMT_DEPTH: Tree depth (1..64)
        - SMT_HASH_ALGORITHM: sha256, sha3_256, blake2s or blake2b_256
        """
        overrides: dict[str, Any] = {}

        if os.getenv("SMT_DEPTH"):
            raw_depth = os.getenv("SMT_DEPTH", "")
            try:
                overrides["depth"] = int(raw_depth)
            except ValueError:
                raise ConfigurationException(
                    f"SMT_DEPTH must be an integer, got {raw_depth!r}"
                ) from None
        if os.getenv("SMT_HASH_ALGORITHM"):
            overrides["hash_algorithm"] = os.getenv("SMT_HASH_ALGORITHM")

        return overrides

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TreeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        return cls(
            depth=data.get("depth", DEFAULT_SMT_DEPTH),
            hash_algorithm=data.get("hash_algorithm", "sha256"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "TreeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        data = self.to_dict()
        data.update(overrides)
        data["extra"] = copy.deepcopy(self.extra)
        return TreeConfig.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "depth": self.depth,
            "hash_algorithm": self.hash_algorithm,
            "extra": self.extra,
        }
