"""
Merkle Multiproofs
Proof generation and the two replay encodings (flags and ids).

A multiproof proves many leaves at once. The verifier starts from the
sorted requested leaves (its "known" values), combines known values with
each other or with the next proof element, and appends every result to
the back of its known queue until only the root is left.

This module replays exactly that queue against the real tree:
- every requested leaf sits on a path to the root; a node is "known"
  when it lies on one of those paths
- a node whose sibling is off every path takes that sibling from the proof
- a promoted node (odd tail) keeps its queue slot and moves up unchanged

Encodings:
- flags: True  = combine the next two known values
         False = combine the next known value with the next proof element
- ids:   for each combination, two indices into [proof..., known...],
         where known = sorted leaves followed by results in evaluation order;
         each pair is ordered by operand byte value

Flags assume the queue order always matches pairing order. When an odd
layer pushes a promoted node ahead of the sibling it must meet, only ids
can describe the replay and get_proof_flags raises ProofShapeError.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Iterable, Sequence

from core.crypto.hashing import to_hex
from core.merkle.merkle_tree import MerkleTree, leaf_index
from core.schemas.errors import EmptyInputError, ProofMismatchError, ProofShapeError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Operand:
    """Where a combination operand comes from: a known slot or a proof position."""
    from_proof: bool
    position: int
    value: bytes


@dataclass(frozen=True)
class ReplayPlan:
    """
    The full combination order for one requested leaf set.

    Attributes:
        leaves: Requested leaves, sorted and unique (known slots 0..n-1)
        proof: Sibling digests in consumption order
        steps: One (known operand, other operand) pair per combination
        fifo: Whether a plain FIFO replay (flags) reproduces the steps
    """
    leaves: tuple[bytes, ...]
    proof: tuple[bytes, ...]
    steps: tuple[tuple[_Operand, _Operand], ...]
    fifo: bool

    @property
    def flags(self) -> list[bool]:
        return [not other.from_proof for _, other in self.steps]

    @property
    def ids(self) -> list[int]:
        offset = len(self.proof)
        ids: list[int] = []
        for first, second in self.steps:
            if second.value < first.value:
                first, second = second, first
            for operand in (first, second):
                ids.append(operand.position if operand.from_proof else offset + operand.position)
        return ids


@dataclass
class _Entry:
    slot: int
    layer: int
    index: int
    value: bytes


def _lift(tree: MerkleTree, entry: _Entry) -> _Entry:
    """Move a promoted node up to the first layer where it has a sibling."""
    top = len(tree.layers) - 1
    while entry.layer < top and (entry.index ^ 1) >= len(tree.layers[entry.layer]):
        entry.layer += 1
        entry.index //= 2
    return entry


def _requested_indices(tree: MerkleTree, requested: Iterable[bytes]) -> list[int]:
    indices = sorted({leaf_index(tree, leaf) for leaf in requested})
    if not indices:
        raise EmptyInputError("At least one leaf must be requested for a multiproof")
    return indices


def plan_multiproof(tree: MerkleTree, requested: Iterable[bytes]) -> ReplayPlan:
    """
    Replay the verifier's known-value queue over ``tree`` for ``requested``.

    Args:
        tree: A built MerkleTree
        requested: Leaf digests to prove; order and duplicates are ignored

    Returns:
        ReplayPlan with the proof, the combination steps and the FIFO verdict

    Raises:
        UnknownLeafError: If a requested digest is not a leaf
        EmptyInputError: If nothing is requested
    """
    indices = _requested_indices(tree, requested)
    layers = tree.layers
    top = len(layers) - 1

    # Every node on a requested path, including promoted copies
    on_path: set[tuple[int, int]] = set()
    for leaf in indices:
        for layer in range(top + 1):
            on_path.add((layer, leaf >> layer))

    queue: deque[_Entry] = deque(
        _lift(tree, _Entry(slot, 0, index, layers[0][index]))
        for slot, index in enumerate(indices)
    )
    next_slot = len(indices)
    proof: list[bytes] = []
    steps: list[tuple[_Operand, _Operand]] = []
    fifo = True
    stalled = 0

    while queue[0].layer < top:
        entry = queue[0]
        sibling = (entry.layer, entry.index ^ 1)

        if sibling in on_path:
            if len(queue) > 1 and (queue[1].layer, queue[1].index) == sibling:
                partner: int | None = 1
            else:
                partner = next(
                    (pos for pos in range(2, len(queue))
                     if (queue[pos].layer, queue[pos].index) == sibling),
                    None,
                )
            if partner is None:
                # Sibling not computed yet; let the rest of the queue catch up
                fifo = False
                stalled += 1
                if stalled > len(queue):
                    raise RuntimeError("Multiproof replay stalled; tree layers are inconsistent")
                queue.rotate(-1)
                continue
            if partner != 1:
                fifo = False
            other = queue[partner]
            del queue[partner]
            queue.popleft()
            operand = _Operand(False, other.slot, other.value)
        else:
            queue.popleft()
            value = layers[sibling[0]][sibling[1]]
            operand = _Operand(True, len(proof), value)
            proof.append(value)

        stalled = 0
        steps.append((_Operand(False, entry.slot, entry.value), operand))
        parent_layer = entry.layer + 1
        parent_index = entry.index // 2
        queue.append(_lift(tree, _Entry(
            next_slot, parent_layer, parent_index, layers[parent_layer][parent_index]
        )))
        next_slot += 1

    logger.debug(
        "Multiproof plan: %d leaves, %d proof elements, %d steps, fifo=%s",
        len(indices), len(proof), len(steps), fifo,
    )
    return ReplayPlan(
        leaves=tuple(layers[0][i] for i in indices),
        proof=tuple(proof),
        steps=tuple(steps),
        fifo=fifo,
    )


def get_multi_proof(tree: MerkleTree, requested: Iterable[bytes]) -> list[bytes]:
    """
    Compute the minimal sibling set proving ``requested`` against the root.

    Siblings that the verifier recomputes itself (requested leaves and their
    ancestors) are never included. Order is the verifier's consumption order.

    Raises:
        UnknownLeafError: If a requested digest is not a leaf
        EmptyInputError: If nothing is requested
    """
    return list(plan_multiproof(tree, requested).proof)


def get_hex_multi_proof(tree: MerkleTree, requested: Iterable[bytes]) -> list[str]:
    return [to_hex(item) for item in get_multi_proof(tree, requested)]


def _checked_plan(tree: MerkleTree, requested: Iterable[bytes], proof: Sequence[bytes]) -> ReplayPlan:
    plan = plan_multiproof(tree, requested)
    if tuple(bytes(item) for item in proof) != plan.proof:
        raise ProofMismatchError(
            "Proof was not generated for the requested leaves",
            details={"expected_length": len(plan.proof), "actual_length": len(proof)},
        )
    return plan


def get_proof_flags(
    tree: MerkleTree,
    requested: Iterable[bytes],
    proof: Sequence[bytes],
) -> list[bool]:
    """
    Encode the combination order of ``proof`` as boolean flags.

    Args:
        tree: The tree the proof was generated from
        requested: The requested leaf digests
        proof: Output of get_multi_proof for the same leaves

    Returns:
        One flag per combination, in replay order

    Raises:
        ProofMismatchError: If ``proof`` does not belong to ``requested``
        ProofShapeError: If no FIFO replay can reproduce the tree (use ids)
    """
    plan = _checked_plan(tree, requested, proof)
    if not plan.fifo:
        raise ProofShapeError(
            "Requested leaves need an out-of-order combination; use proof ids instead",
            details={"leaf_count": len(tree.leaves), "requested": len(plan.leaves)},
        )
    return plan.flags


def get_proof_ids(
    tree: MerkleTree,
    requested: Iterable[bytes],
    proof: Sequence[bytes],
) -> list[int]:
    """
    Encode the combination order of ``proof`` as explicit operand indices.

    Indices address the virtual array ``[proof..., leaves..., results...]``;
    two ids per combination, lower operand (by byte value) first.

    Raises:
        ProofMismatchError: If ``proof`` does not belong to ``requested``
    """
    return _checked_plan(tree, requested, proof).ids


__all__ = [
    "ReplayPlan",
    "plan_multiproof",
    "get_multi_proof",
    "get_hex_multi_proof",
    "get_proof_flags",
    "get_proof_ids",
]
