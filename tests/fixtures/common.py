"""
Common test fixtures shared by all test modules.

Provides factory functions for:
- Application values and the trees built from them
- Selecting leaves / values by their canonical position
- Single-byte corruption of digests
"""

from typing import Sequence

from core.crypto.hashing import Hasher, keccak256
from core.merkle.merkle_tree import MerkleTree, build_tree, hash_leaf


def make_values(count: int, prefix: str = "") -> list[str]:
    """
    Create ``count`` distinct string values: "1", "2", ... (optionally prefixed).
    """
    return [f"{prefix}{i}" for i in range(1, count + 1)]


def make_tree(count: int, hasher: Hasher = keccak256, prefix: str = "") -> MerkleTree:
    """Build a tree over ``make_values(count, prefix)``."""
    return build_tree(make_values(count, prefix), hasher)


def leaves_at(tree: MerkleTree, positions: Sequence[int]) -> list[bytes]:
    """Leaf digests at the given canonical (sorted) positions."""
    return [tree.leaves[i] for i in positions]


def values_at(tree: MerkleTree, values: Sequence[str], positions: Sequence[int]) -> list[str]:
    """
    Raw values whose leaves sit at the given canonical positions.

    Canonical order is by digest, so position i is rarely values[i].
    """
    by_leaf = {hash_leaf(value, tree.hasher): value for value in values}
    return [by_leaf[tree.leaves[i]] for i in positions]


def flip_byte(digest: bytes, position: int = 0) -> bytes:
    """Return ``digest`` with one byte inverted."""
    mutable = bytearray(digest)
    mutable[position] ^= 0xFF
    return bytes(mutable)
