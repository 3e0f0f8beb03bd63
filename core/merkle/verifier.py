"""
Merkle Multiproof Verification
Pure replay of a (root, leaves, proof, flags | ids) tuple.

Verification never needs the tree and never raises: malformed, truncated
or adversarial input returns False. Only the explicit arrays are used,
so the same logic can be ported to a metered environment as-is.
"""
from __future__ import annotations

from collections import deque
from typing import Any, Sequence

from core.crypto.hashing import DIGEST_SIZE, Hasher, hash_pair, keccak256
from core.merkle.merkle_tree import MerkleProof


def _is_digest(value: Any) -> bool:
    return isinstance(value, (bytes, bytearray)) and len(value) == DIGEST_SIZE


def _digests(values: Any) -> list[bytes] | None:
    """Copy a sequence of digests, or None if any item is malformed."""
    if isinstance(values, (bytes, bytearray, str)):
        return None
    try:
        items = list(values)
    except Exception:
        return None
    if not all(_is_digest(item) for item in items):
        return None
    return [bytes(item) for item in items]


def _known_leaves(leaves: Any) -> list[bytes] | None:
    digests = _digests(leaves)
    if not digests:
        return None
    return sorted(set(digests))


def _flags(flags: Any) -> list[bool] | None:
    if isinstance(flags, (bytes, bytearray, str)):
        return None
    try:
        items = list(flags)
    except Exception:
        return None
    if not all(isinstance(item, bool) for item in items):
        return None
    return items


def verify_with_flags(
    root: bytes,
    leaves: Sequence[bytes],
    proof: Sequence[bytes],
    flags: Sequence[bool],
    hasher: Hasher = keccak256,
) -> bool:
    """
    Verify a multiproof encoded with boolean flags.

    Replay: a FIFO of known values is seeded with the sorted, unique leaves.
    For each flag, True combines the next two known values; False combines
    the next known value with the next proof element. Results join the back
    of the FIFO. At the end exactly one known value must remain, the proof
    must be fully consumed, and the value must equal ``root``.

    Returns:
        True if the proof is valid, False otherwise
    """
    known_leaves = _known_leaves(leaves)
    proof_items = _digests(proof)
    flag_items = _flags(flags)
    if known_leaves is None or proof_items is None or flag_items is None or not _is_digest(root):
        return False

    known = deque(known_leaves)
    cursor = 0

    for flag in flag_items:
        if flag:
            if len(known) < 2:
                return False
            first = known.popleft()
            second = known.popleft()
        else:
            if not known or cursor >= len(proof_items):
                return False
            first = known.popleft()
            second = proof_items[cursor]
            cursor += 1
        known.append(hash_pair(first, second, hasher))

    return len(known) == 1 and cursor == len(proof_items) and known[0] == bytes(root)


def _ids(ids: Any) -> list[int] | None:
    if isinstance(ids, (bytes, bytearray, str)):
        return None
    try:
        items = list(ids)
    except Exception:
        return None
    if not all(isinstance(item, int) and not isinstance(item, bool) for item in items):
        return None
    return items


def verify_with_ids(
    root: bytes,
    leaves: Sequence[bytes],
    proof: Sequence[bytes],
    ids: Sequence[int],
    hasher: Hasher = keccak256,
) -> bool:
    """
    Verify a multiproof encoded with explicit operand ids.

    Ids come in pairs indexing the virtual array
    ``[proof..., sorted leaves..., results...]``; every result is appended
    as soon as it is computed. Each entry may be consumed once, only
    already-available entries may be referenced, every proof element must
    be consumed, and exactly one known value may remain: the root.

    Returns:
        True if the proof is valid, False otherwise
    """
    known_leaves = _known_leaves(leaves)
    proof_items = _digests(proof)
    id_items = _ids(ids)
    if known_leaves is None or proof_items is None or id_items is None or not _is_digest(root):
        return False
    if len(id_items) % 2:
        return False

    values = proof_items + known_leaves
    consumed = [False] * len(values)

    for i in range(0, len(id_items), 2):
        first, second = id_items[i], id_items[i + 1]
        if first == second:
            return False
        if not (0 <= first < len(values) and 0 <= second < len(values)):
            return False
        if consumed[first] or consumed[second]:
            return False
        consumed[first] = consumed[second] = True
        values.append(hash_pair(values[first], values[second], hasher))
        consumed.append(False)

    remaining = [pos for pos, used in enumerate(consumed) if not used]
    if len(remaining) != 1 or remaining[0] < len(proof_items):
        return False
    return values[remaining[0]] == bytes(root)


def verify_merkle_proof(proof: MerkleProof, hasher: Hasher = keccak256) -> bool:
    """
    Verify a single-leaf proof.

    Folds the siblings into the leaf bottom-up with sorted-pair hashing
    and compares against the claimed root.
    """
    return verify_proof(proof.root, proof.leaf, proof.siblings, hasher)


def verify_proof(
    root: bytes,
    leaf: bytes,
    siblings: Sequence[bytes],
    hasher: Hasher = keccak256,
) -> bool:
    """Verify a leaf against ``root`` from its raw sibling path."""
    sibling_items = _digests(siblings)
    if sibling_items is None or not _is_digest(leaf) or not _is_digest(root):
        return False

    current = bytes(leaf)
    for sibling in sibling_items:
        current = hash_pair(current, sibling, hasher)

    return current == bytes(root)


__all__ = [
    "verify_with_flags",
    "verify_with_ids",
    "verify_merkle_proof",
    "verify_proof",
]
