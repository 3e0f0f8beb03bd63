"""
Test fixtures package for multiproof tests.

Provides factory functions for values, trees and payloads.

Usage:
    from fixtures import make_values, make_tree

    def test_something():
        tree = make_tree(16)
"""

from .common import (
    make_values,
    make_tree,
    leaves_at,
    values_at,
    flip_byte,
)

__all__ = [
    "make_values",
    "make_tree",
    "leaves_at",
    "values_at",
    "flip_byte",
]
