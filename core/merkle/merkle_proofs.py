"""
Merkle Proofs Convenience Wrappers
Class-based interfaces over the tree, multiproof and verifier functions.

This module provides:
- MerkleProver: Generate single-leaf proofs and multiproof payloads
- MerkleVerifier: Verify proofs and payloads

Both work with raw application values as well as leaf digests.
"""
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from core.crypto.hashing import Hasher, get_hasher, hasher_name, keccak256, to_hex
from core.merkle.merkle_tree import (
    MerkleProof,
    MerkleTree,
    Value,
    build_tree,
    elements,
    get_proof,
    pairs,
)
from core.merkle.multiproof import plan_multiproof
from core.merkle.verifier import verify_merkle_proof, verify_with_flags, verify_with_ids
from core.schemas.errors import ProofShapeError, UnsupportedHashError
from core.schemas.proof import MultiProofPayload, ProofEncoding


logger = logging.getLogger(__name__)


class MerkleProver:
    """
    Generates proofs against one tree.

    Example:
        >>> prover = MerkleProver.from_values(["a", "b", "c"])
        >>> payload = prover.prove_many(["a", "c"])
        >>> MerkleVerifier.verify_payload(payload)
        True
    """

    def __init__(self, tree: MerkleTree) -> None:
        self.tree = tree

    @classmethod
    def from_values(cls, values: Iterable[Value], hasher: Hasher = keccak256) -> "MerkleProver":
        return cls(build_tree(values, hasher))

    @property
    def root(self) -> bytes:
        return self.tree.root

    def prove(self, value: Value) -> MerkleProof:
        """
        Single-leaf proof for a raw value.

        Raises:
            UnknownLeafError: If the value is not part of the tree
        """
        (leaf,) = elements(self.tree, [value])
        return get_proof(self.tree, leaf)

    def prove_many(
        self,
        values: Sequence[Value],
        encoding: ProofEncoding = "flags",
        expand_pairs: bool = False,
    ) -> MultiProofPayload:
        """
        Build a wire payload proving every value in ``values``.

        Args:
            values: Raw application values to prove
            encoding: "flags", "ids" or "both"
            expand_pairs: Prove each leaf together with its layer-0 sibling

        Raises:
            UnknownLeafError: If any value is not part of the tree
            EmptyInputError: If ``values`` is empty
            ProofShapeError: If flags were requested for a shape only ids can describe
        """
        leaves = elements(self.tree, values)
        if expand_pairs:
            leaves = pairs(self.tree, leaves)

        plan = plan_multiproof(self.tree, leaves)
        if encoding in ("flags", "both") and not plan.fifo:
            raise ProofShapeError(
                "Requested leaves need an out-of-order combination; use ids encoding",
                details={"leaf_count": len(self.tree), "requested": len(plan.leaves)},
            )

        logger.info(
            "Built %s multiproof for %d leaves with %d proof elements",
            encoding, len(plan.leaves), len(plan.proof),
        )
        return MultiProofPayload(
            hash_algorithm=hasher_name(self.tree.hasher),
            root=to_hex(self.tree.root),
            leaves=[to_hex(leaf) for leaf in plan.leaves],
            proof=[to_hex(item) for item in plan.proof],
            flags=plan.flags if encoding in ("flags", "both") else None,
            ids=plan.ids if encoding in ("ids", "both") else None,
        )


class MerkleVerifier:
    """
    Stateless verification helpers.

    Example:
        >>> proof = MerkleProver.from_values(["a", "b"]).prove("a")
        >>> MerkleVerifier.verify(proof)
        True
    """

    @staticmethod
    def verify(proof: MerkleProof, hasher: Hasher = keccak256) -> bool:
        """Verify a single-leaf proof."""
        return verify_merkle_proof(proof, hasher)

    @staticmethod
    def verify_payload(payload: MultiProofPayload) -> bool:
        """
        Verify every encoding carried by a payload.

        Returns False (never raises) on an unknown hash algorithm or any
        failing encoding.
        """
        try:
            hasher = get_hasher(payload.hash_algorithm)
        except UnsupportedHashError:
            logger.warning("Payload uses unsupported hash algorithm %r", payload.hash_algorithm)
            return False

        root = payload.root_bytes()
        leaves = payload.leaf_bytes()
        proof = payload.proof_bytes()

        if payload.flags is not None and not verify_with_flags(root, leaves, proof, payload.flags, hasher):
            return False
        if payload.ids is not None and not verify_with_ids(root, leaves, proof, payload.ids, hasher):
            return False
        return True


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
]
