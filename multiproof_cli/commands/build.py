"""
CLI Build Command

Build a Merkle tree from a values file and report its root.

Values files are either a JSON array of strings or plain text with one
value per line (blank lines are ignored, like empty values in the tree).

Usage:
    multiproof build values.txt [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from core.crypto.hashing import to_hex
from core.merkle import build_tree
from core.schemas.errors import MultiproofException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class BuildSummary:
    """Summary of a tree build for CLI output."""
    values_path: str = ""
    hash_algorithm: str = ""
    root: str = ""
    leaf_count: int = 0
    depth: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def read_values(path: Path) -> list[str]:
    """
    Read application values from ``path``.

    Raises:
        ValueError: If a JSON values file is not an array of strings
    """
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".json":
        data = json.loads(text)
        if not isinstance(data, list) or not all(isinstance(v, str) for v in data):
            raise ValueError(f"Expected a JSON array of strings in {path}")
        return data
    return [line.rstrip("\r") for line in text.split("\n")]


def print_summary_human(summary: BuildSummary) -> None:
    print(f"values: {summary.values_path}")
    print(f"hash_algorithm: {summary.hash_algorithm}")
    print(f"leaf_count: {summary.leaf_count}")
    print(f"depth: {summary.depth}")
    print(f"root: {summary.root}")


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config = args.cli_config
    values_path = Path(args.values_path)

    if not values_path.exists():
        print(f"Error: Values file not found: {values_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        values = read_values(values_path)
        tree = build_tree(values, config.hasher, allow_empty=config.allow_empty_tree)
    except (MultiproofException, ValueError) as e:
        print(f"Error building tree: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = BuildSummary(
        values_path=str(values_path),
        hash_algorithm=config.hash_algorithm,
        root=to_hex(tree.root),
        leaf_count=len(tree),
        depth=tree.depth,
    )
    logger.info("Built tree over %d leaves from %s", summary.leaf_count, values_path)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)
    return EXIT_SUCCESS
