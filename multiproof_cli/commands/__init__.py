"""
CLI command modules.
"""

from multiproof_cli.commands import build, prove, verify

__all__ = ["build", "prove", "verify"]
