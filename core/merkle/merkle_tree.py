"""
Merkle Tree Implementation
Canonical leaf sets, sorted-pair tree construction and single-leaf proofs.

This module provides:
- Canonicalization of raw values into a sorted, duplicate-free leaf set
- Layer-by-layer tree construction with order-normalized pair hashing
- Single-leaf sibling paths (and their hex forms)
- Helpers mapping raw values / leaf pairs onto tree digests

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = hasher(value); str values are UTF-8 encoded first
2. Empty / None values are dropped, duplicate digests kept once
3. Leaves are sorted ascending by unsigned byte value
4. Parent hashing: parent = hasher(min(a, b) + max(a, b))
5. Odd layer: the last node is promoted unchanged (never paired with itself)
6. Empty tree: a single layer holding hasher(b"")
7. Single leaf: root = leaf

Determinism Notes:
- Input order never affects the tree; two builds over the same logical set
  produce identical layers
- Trees are frozen once built and safe to share between threads
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence, Union

from core.crypto.hashing import Hasher, hash_pair, keccak256, to_hex
from core.schemas.errors import EmptyInputError, UnknownLeafError


logger = logging.getLogger(__name__)

Value = Union[bytes, bytearray, str]
Layer = tuple[bytes, ...]


@dataclass(frozen=True)
class MerkleTree:
    """
    An immutable Merkle tree over a canonical leaf set.

    Attributes:
        layers: Layer 0 (the leaves, or the empty sentinel) up to the root layer
        leaves: Canonical leaf digests; empty for the degenerate empty tree
        hasher: Hash function used for every combination
    """
    layers: tuple[Layer, ...]
    leaves: Layer
    hasher: Hasher = field(default=keccak256, repr=False, compare=False)
    _positions: dict[bytes, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_positions", {leaf: i for i, leaf in enumerate(self.leaves)}
        )

    @property
    def root(self) -> bytes:
        return self.layers[-1][0]

    @property
    def depth(self) -> int:
        """Number of layers, leaves and root included."""
        return len(self.layers)

    @property
    def is_empty(self) -> bool:
        return not self.leaves

    def index_of(self, leaf: bytes) -> int | None:
        """Position of ``leaf`` in layer 0, or None."""
        return self._positions.get(bytes(leaf))

    def __contains__(self, leaf: object) -> bool:
        return isinstance(leaf, (bytes, bytearray)) and bytes(leaf) in self._positions

    def __len__(self) -> int:
        return len(self.leaves)


@dataclass(frozen=True)
class MerkleProof:
    """
    A single-leaf inclusion proof.

    Pairs are hashed in byte order, so no left/right bits are needed.

    Attributes:
        leaf: The leaf digest being proven
        siblings: Sibling digests from the leaf layer upward (promoted levels skipped)
        root: The Merkle root this proof is against
    """
    leaf: bytes
    siblings: tuple[bytes, ...]
    root: bytes


def _encode(value: Value) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def hash_leaf(value: Value, hasher: Hasher = keccak256) -> bytes:
    """Hash one application value into a leaf digest."""
    return hasher(_encode(value))


def canonicalize(values: Iterable[Value | None], hasher: Hasher = keccak256) -> Layer:
    """
    Turn raw values into the canonical leaf sequence.

    Empty and None values are skipped, each remaining value is hashed once,
    duplicate digests are dropped and the result is sorted ascending.

    Example:
        >>> canonicalize(["b", "a", "a", ""]) == tuple(sorted({hash_leaf("a"), hash_leaf("b")}))
        True
    """
    digests = {hash_leaf(value, hasher) for value in values if value}
    return tuple(sorted(digests))


def combine(left: bytes, right: bytes, hasher: Hasher = keccak256) -> bytes:
    """
    Compute the parent of two nodes: hasher(min(a, b) + max(a, b)).

    Commutative: ``combine(a, b) == combine(b, a)``.
    """
    return hash_pair(left, right, hasher)


def build_layers(leaves: Sequence[bytes], hasher: Hasher = keccak256) -> tuple[Layer, ...]:
    """
    Build every layer from canonical leaves up to the root.

    Example: [a, b, c] -> [[a, b, c], [ab, c], [abc]]

    Args:
        leaves: Canonical leaf digests (see ``canonicalize``)
        hasher: Hash function for pair combination

    Returns:
        Tuple of layers; the last one holds only the root
    """
    if len(leaves) == 0:
        return ((hasher(b""),),)

    layers: list[Layer] = [tuple(leaves)]

    while len(layers[-1]) > 1:
        current = layers[-1]
        next_layer: list[bytes] = []
        for i in range(0, len(current), 2):
            if i + 1 < len(current):
                next_layer.append(combine(current[i], current[i + 1], hasher))
            else:
                # Odd tail moves up unchanged
                next_layer.append(current[i])
        layers.append(tuple(next_layer))

    return tuple(layers)


def build_tree(
    values: Iterable[Value | None],
    hasher: Hasher = keccak256,
    allow_empty: bool = True,
) -> MerkleTree:
    """
    Canonicalize ``values`` and build a tree over them.

    Args:
        values: Raw application values (bytes or str)
        hasher: Hash function for leaves and combinations
        allow_empty: Whether an empty input may yield the sentinel tree

    Returns:
        A frozen MerkleTree

    Raises:
        EmptyInputError: If no non-empty values are given and allow_empty is False
    """
    leaves = canonicalize(values, hasher)
    if not leaves and not allow_empty:
        raise EmptyInputError("Cannot build a Merkle tree from zero values")

    layers = build_layers(leaves, hasher)
    logger.debug("Built Merkle tree: %d leaves, %d layers", len(leaves), len(layers))
    return MerkleTree(layers=layers, leaves=leaves, hasher=hasher)


def get_root(tree: MerkleTree) -> bytes:
    """Return the root digest (sole element of the last layer)."""
    return tree.root


def get_hex_root(tree: MerkleTree) -> str:
    return to_hex(tree.root)


def sibling_of(layer: Sequence[bytes], index: int) -> bytes | None:
    """Sibling of ``layer[index]``, or None when the node is a promoted tail."""
    pair_index = index ^ 1
    if pair_index < len(layer):
        return layer[pair_index]
    return None


def leaf_index(tree: MerkleTree, leaf: bytes) -> int:
    """
    Position of a leaf digest in layer 0.

    Raises:
        UnknownLeafError: If the digest is not a leaf of ``tree``
    """
    index = tree.index_of(leaf)
    if index is None:
        raise UnknownLeafError("Element does not exist in Merkle tree", leaf=leaf)
    return index


def elements(tree: MerkleTree, values: Iterable[Value]) -> list[bytes]:
    """
    Map raw values to their leaf digests, in input order.

    Raises:
        UnknownLeafError: If any value is not part of the tree
    """
    digests = [hash_leaf(value, tree.hasher) for value in values]
    for digest in digests:
        leaf_index(tree, digest)
    return digests


def pairs(tree: MerkleTree, leaves: Iterable[bytes]) -> list[bytes]:
    """
    Expand requested leaves with their layer-0 siblings.

    Proving the expanded set keeps every leaf-layer sibling out of the
    proof array: the proof gets shorter and the leaves array longer.

    Returns:
        Sorted, duplicate-free leaf digests

    Raises:
        UnknownLeafError: If any digest is not a leaf of ``tree``
    """
    expanded: set[bytes] = set()
    for leaf in leaves:
        index = leaf_index(tree, leaf)
        expanded.add(tree.leaves[index])
        sibling = sibling_of(tree.leaves, index)
        if sibling is not None:
            expanded.add(sibling)
    return sorted(expanded)


def get_proof(tree: MerkleTree, leaf: bytes) -> MerkleProof:
    """
    Build the single-leaf sibling path for ``leaf``.

    Levels where the node is promoted contribute nothing.

    Raises:
        UnknownLeafError: If the digest is not a leaf of ``tree``
    """
    index = leaf_index(tree, leaf)
    siblings: list[bytes] = []

    for layer in tree.layers[:-1]:
        sibling = sibling_of(layer, index)
        if sibling is not None:
            siblings.append(sibling)
        index //= 2

    return MerkleProof(leaf=bytes(leaf), siblings=tuple(siblings), root=tree.root)


def get_hex_proof(tree: MerkleTree, leaf: bytes) -> list[str]:
    return [to_hex(sibling) for sibling in get_proof(tree, leaf).siblings]


__all__ = [
    "MerkleTree",
    "MerkleProof",
    "hash_leaf",
    "canonicalize",
    "combine",
    "build_layers",
    "build_tree",
    "get_root",
    "get_hex_root",
    "sibling_of",
    "leaf_index",
    "elements",
    "pairs",
    "get_proof",
    "get_hex_proof",
]
