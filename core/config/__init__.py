"""
Runtime Configuration Module

Provides configuration loading and management for multiproof tooling.
"""

from .runtime import (
    ENV_PREFIX,
    RuntimeConfig,
    default_config_paths,
    get_default_config_template,
    load_config,
)

__all__ = [
    "ENV_PREFIX",
    "RuntimeConfig",
    "default_config_paths",
    "get_default_config_template",
    "load_config",
]
