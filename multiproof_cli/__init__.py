"""
Multiproof CLI

Command-line interface for building Merkle trees and multiproofs.

Usage:
    python -m multiproof_cli build values.txt
    python -m multiproof_cli prove values.txt --leaf alice --leaf bob --out proof.json
    python -m multiproof_cli verify proof.json
    python -m multiproof_cli config --show
"""

__version__ = "0.1.0"
