"""
CLI Prove Command

Build a multiproof payload for selected values of a values file.

Usage:
    multiproof prove values.txt --leaf alice --leaf carol [--encoding flags|ids|both]
                     [--pairs] [--out proof.json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.merkle import MerkleProver, build_tree
from core.schemas.errors import MultiproofException, ProofShapeError
from multiproof_cli.commands.build import read_values


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    Writes the payload JSON to ``--out`` or stdout.

    Returns:
        Exit code
    """
    config = args.cli_config
    values_path = Path(args.values_path)
    encoding = args.encoding or config.default_encoding

    if not values_path.exists():
        print(f"Error: Values file not found: {values_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    requested: list[str] = list(args.leaf or [])
    if args.leaves_file:
        requested.extend(v for v in read_values(Path(args.leaves_file)) if v)
    if not requested:
        print("Error: No leaves requested (use --leaf or --leaves-file)", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        tree = build_tree(read_values(values_path), config.hasher)
        payload = MerkleProver(tree).prove_many(
            requested, encoding=encoding, expand_pairs=args.pairs
        )
    except MultiproofException as e:
        if args.json_errors:
            print(json.dumps(e.to_error_model().model_dump(), indent=2), file=sys.stderr)
        else:
            print(f"Error building proof: {e}", file=sys.stderr)
            if isinstance(e, ProofShapeError):
                print("Hint: rerun with --encoding ids", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    output = payload.model_dump_json(indent=2, exclude_none=True)
    if args.out:
        out_path = Path(args.out)
        out_path.write_text(output + "\n", encoding="utf-8")
        logger.info("Wrote %s payload to %s", payload.encoding, out_path)
        print(f"Wrote proof for {len(payload.leaves)} leaves to {out_path}")
    else:
        print(output)
    return EXIT_SUCCESS
