"""
Runtime Configuration

Central configuration for tree construction, proof encoding and logging.

Sources, lowest to highest precedence:
- Dataclass defaults
- JSON config file (explicit path, or ./multiproof.json, ./.multiproof.json,
  ~/.config/multiproof/config.json)
- Environment variables (MULTIPROOF_* prefix, .env loaded via python-dotenv)
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from core.crypto.hashing import Hasher, get_hasher

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "MULTIPROOF_"

_ENCODINGS = ("flags", "ids", "both")


@dataclass
class RuntimeConfig:
    """
    Runtime configuration for the multiproof library and CLI.

    Can be loaded from:
    - Environment variables
    - JSON file
    - Programmatic construction
    """
    hash_algorithm: str = "keccak256"
    allow_empty_tree: bool = True
    default_encoding: str = "flags"
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        if self.default_encoding not in _ENCODINGS:
            raise ValueError(
                f"default_encoding must be one of {_ENCODINGS}, got {self.default_encoding!r}"
            )

    @property
    def hasher(self) -> Hasher:
        """Resolve the configured hasher; raises UnsupportedHashError."""
        return get_hasher(self.hash_algorithm)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - MULTIPROOF_HASH_ALGORITHM: keccak256 or sha256
        - MULTIPROOF_ALLOW_EMPTY_TREE: Allow the empty sentinel tree (true/false)
        - MULTIPROOF_DEFAULT_ENCODING: flags, ids or both
        - MULTIPROOF_LOG_LEVEL: Log level
        - MULTIPROOF_LOG_FILE: Optional log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides["hash_algorithm"] = os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM")
        if os.getenv(f"{ENV_PREFIX}ALLOW_EMPTY_TREE"):
            overrides["allow_empty_tree"] = (
                os.getenv(f"{ENV_PREFIX}ALLOW_EMPTY_TREE", "true").lower() == "true"
            )
        if os.getenv(f"{ENV_PREFIX}DEFAULT_ENCODING"):
            overrides["default_encoding"] = os.getenv(f"{ENV_PREFIX}DEFAULT_ENCODING", "flags").lower()
        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO").upper()
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Create configuration from defaults plus environment overrides."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_file(cls, path: Path) -> "RuntimeConfig":
        """Load configuration from a JSON file; unknown keys are ignored."""
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        known = {key: data[key] for key in cls.__dataclass_fields__ if key in data}
        return cls(**known)

    def with_overrides(self, **overrides: Any) -> "RuntimeConfig":
        """Return a copy with the given fields replaced (None values skipped)."""
        data = self.to_dict()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return RuntimeConfig(**data)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def default_config_paths() -> list[Path]:
    return [
        Path.cwd() / "multiproof.json",
        Path.cwd() / ".multiproof.json",
        Path.home() / ".config" / "multiproof" / "config.json",
    ]


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = RuntimeConfig()

    if config_path is not None:
        config = RuntimeConfig.from_file(config_path)
    else:
        for default_path in default_config_paths():
            if default_path.exists():
                config = RuntimeConfig.from_file(default_path)
                break

    return config.with_overrides(**RuntimeConfig._get_env_overrides())


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return json.dumps(RuntimeConfig().to_dict(), indent=2) + "\n"
