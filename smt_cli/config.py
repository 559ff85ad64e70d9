"""
CLI Configuration

Configuration management for the sparse Merkle tree CLI.
Supports environment variables and configuration files (JSON, or YAML for
.yaml/.yml paths).

Tree settings (depth, hash_algorithm) always go through TreeConfig, so a
file value and an SMT_DEPTH / SMT_HASH_ALGORITHM override are validated the
same way.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from core.config.runtime import TreeConfig


# Environment variable prefix
ENV_PREFIX = "SMT_"

LEAF_ENCODINGS = ("hex", "utf8")

YAML_SUFFIXES = (".yaml", ".yml")


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Tree settings
    tree: TreeConfig = field(default_factory=TreeConfig)

    # Input
    leaf_encoding: str = "hex"  # "hex" or "utf8"

    # Logging
    log_level: str = "WARNING"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"

    def to_dict(self) -> dict[str, Any]:
        """Flat view, in the same shape as the config file."""
        return {
            "depth": self.tree.depth,
            "hash_algorithm": self.tree.hash_algorithm,
            "leaf_encoding": self.leaf_encoding,
            "log_level": self.log_level,
            "log_file": self.log_file,
            "default_output_format": self.default_output_format,
        }


def _read_config_data(path: Path) -> dict[str, Any]:
    with open(path, "r") as f:
        if path.suffix.lower() in YAML_SUFFIXES:
            import yaml
            data = yaml.safe_load(f) or {}
        else:
            data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON or YAML file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    data = _read_config_data(path)

    config = CLIConfig(tree=TreeConfig.from_dict(data))
    config.leaf_encoding = data.get("leaf_encoding", config.leaf_encoding)

    # Logging
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)

    # Output
    config.default_output_format = data.get(
        "default_output_format", config.default_output_format
    )

    return config


def apply_env_overrides(config: CLIConfig) -> CLIConfig:
    """
    Overlay SMT_* environment variables on a loaded configuration.

    Raises:
        ConfigurationException: If SMT_DEPTH or SMT_HASH_ALGORITHM is invalid
    """
    config.tree = config.tree.with_env_overrides()

    if os.getenv(f"{ENV_PREFIX}LEAF_ENCODING"):
        config.leaf_encoding = os.getenv(f"{ENV_PREFIX}LEAF_ENCODING", "hex")
    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "WARNING")
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")

    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    # Start with defaults
    config = CLIConfig()

    # Load from file if provided
    if config_path and config_path.exists():
        config = load_config_from_file(config_path)

    # Check for default config locations
    default_paths = [
        Path.cwd() / "smt.json",
        Path.cwd() / ".smt.json",
        Path.cwd() / "smt.yaml",
        Path.home() / ".config" / "smt" / "config.json",
    ]

    if config_path is None:
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    config = apply_env_overrides(config)

    if config.leaf_encoding not in LEAF_ENCODINGS:
        raise ValueError(
            f"leaf_encoding must be one of {LEAF_ENCODINGS}, got {config.leaf_encoding!r}"
        )

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return json.dumps(CLIConfig().to_dict(), indent=2) + "\n"
