"""
CLI Verify Command

Verify a multiproof payload offline.

Usage:
    multiproof verify proof.json [--root 0x...] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from core.merkle import MerkleVerifier
from core.schemas.errors import ErrorCodes, MultiproofError
from core.schemas.proof import MultiProofPayload


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of payload verification for CLI output."""
    payload_path: str = ""
    root: str = ""
    encoding: str = ""
    leaf_count: int = 0
    proof_length: int = 0
    ok: bool = False
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["errors"]:
            del d["errors"]
        return d


def load_payload(path: Path) -> MultiProofPayload:
    """Load and validate a payload file; raises pydantic ValidationError."""
    return MultiProofPayload.model_validate_json(path.read_text(encoding="utf-8"))


def print_summary_human(summary: VerifySummary) -> None:
    print(f"payload: {summary.payload_path}")
    print(f"root: {summary.root}")
    print(f"encoding: {summary.encoding}")
    print(f"leaves: {summary.leaf_count}")
    print(f"proof_length: {summary.proof_length}")
    print(f"ok: {str(summary.ok).lower()}")
    for err in summary.errors:
        print(f"  ✗ {err}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 valid, 1 unreadable payload, 2 invalid proof)
    """
    payload_path = Path(args.payload_path)

    if not payload_path.exists():
        print(f"Error: Payload not found: {payload_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        payload = load_payload(payload_path)
        if args.root:
            # Verify against a trusted root rather than the one shipped in the payload
            payload = MultiProofPayload.model_validate(
                {**payload.model_dump(), "root": args.root}
            )
    except (ValidationError, ValueError) as e:
        if args.json:
            error = MultiproofError(
                code=ErrorCodes.SCHEMA_VALIDATION_ERROR,
                message=f"Invalid payload: {e}",
                details={"payload_path": str(payload_path)},
            )
            print(json.dumps(error.model_dump(), indent=2))
        else:
            print(f"Error loading payload: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    ok = MerkleVerifier.verify_payload(payload)
    summary = VerifySummary(
        payload_path=str(payload_path),
        root=payload.root,
        encoding=payload.encoding,
        leaf_count=len(payload.leaves),
        proof_length=len(payload.proof),
        ok=ok,
    )
    if not ok:
        summary.errors.append("Recomputed root does not match the claimed root")
        logger.warning("Multiproof verification failed for %s", payload_path)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS if ok else EXIT_VERIFICATION_FAILED
