"""
Multiproof CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m multiproof_cli build <values_file> [--json]
    python -m multiproof_cli prove <values_file> --leaf V [--leaf V ...] [--encoding flags|ids|both] [--pairs] [--out PATH]
    python -m multiproof_cli verify <payload_file> [--root 0x...] [--json]
    python -m multiproof_cli config --init|--show

Environment Variables:
    MULTIPROOF_HASH_ALGORITHM       Hash algorithm (keccak256, sha256)
    MULTIPROOF_ALLOW_EMPTY_TREE     Allow building the empty sentinel tree (default: true)
    MULTIPROOF_DEFAULT_ENCODING     Proof encoding (flags, ids, both)
    MULTIPROOF_LOG_LEVEL            Log level (default: INFO)
    MULTIPROOF_LOG_FILE             Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.config import get_default_config_template, load_config
from core.crypto.hashing import get_hasher
from multiproof_cli import __version__
from multiproof_cli.commands import build, prove, verify


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="multiproof",
        description="Build Merkle trees, generate compact multiproofs and verify them.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./multiproof.json or ~/.config/multiproof/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--hash",
        dest="hash_algorithm",
        type=str,
        default=None,
        choices=["keccak256", "sha256"],
        help="Hash algorithm (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a tree and print its root",
        description="Canonicalize values, build the Merkle tree and report its root.",
    )
    build_parser.add_argument(
        "values_path",
        type=str,
        help="Values file (JSON array of strings, or one value per line)",
    )
    build_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    build_parser.set_defaults(func=build.build_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Generate a multiproof payload",
        description="Generate one proof attesting membership of several values.",
    )
    prove_parser.add_argument(
        "values_path",
        type=str,
        help="Values file the tree is built from",
    )
    prove_parser.add_argument(
        "--leaf", "-l",
        action="append",
        default=None,
        help="Value to prove (repeatable)",
    )
    prove_parser.add_argument(
        "--leaves-file",
        type=str,
        default=None,
        help="File with values to prove (same format as the values file)",
    )
    prove_parser.add_argument(
        "--encoding",
        type=str,
        choices=["flags", "ids", "both"],
        default=None,
        help="Proof encoding (default: from config or flags)",
    )
    prove_parser.add_argument(
        "--pairs",
        action="store_true",
        default=False,
        help="Also prove each value's leaf-layer sibling (shorter proof, more leaves)",
    )
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Output path for the payload JSON (default: stdout)",
    )
    prove_parser.add_argument(
        "--json-errors",
        action="store_true",
        default=False,
        help="Report errors as structured JSON on stderr",
    )
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a multiproof payload offline",
        description="Replay a payload's flags and/or ids and compare with its root.",
    )
    verify_parser.add_argument(
        "payload_path",
        type=str,
        help="Path to payload JSON",
    )
    verify_parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Trusted root to verify against instead of the payload's root",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="multiproof.json",
        help="Path for config file (default: multiproof.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (MULTIPROOF_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: multiproof config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config).with_overrides(hash_algorithm=args.hash_algorithm)
        get_hasher(config.hash_algorithm)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if log_level == "DEBUG":
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
