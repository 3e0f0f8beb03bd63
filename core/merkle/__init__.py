"""
Merkle Trees and Multiproofs
Sorted-pair Merkle trees with compact multi-membership proofs.

This package provides:
- build_tree / get_root: canonical tree construction
- get_multi_proof: minimal sibling set proving many leaves at once
- get_proof_flags / get_proof_ids: the two replay encodings
- verify_with_flags / verify_with_ids: total, tree-free verifiers
- get_proof / verify_merkle_proof: classic single-leaf proofs

Usage:
    from core.merkle import build_tree, elements, get_multi_proof, get_proof_flags, verify_with_flags

    tree = build_tree(["alice", "bob", "carol", "dave"])
    leaves = elements(tree, ["bob", "dave"])
    proof = get_multi_proof(tree, leaves)
    flags = get_proof_flags(tree, leaves, proof)

    assert verify_with_flags(tree.root, leaves, proof, flags)
"""
from .merkle_tree import (
    MerkleProof,
    MerkleTree,
    build_layers,
    build_tree,
    canonicalize,
    combine,
    elements,
    get_hex_proof,
    get_hex_root,
    get_proof,
    get_root,
    hash_leaf,
    pairs,
)

from .multiproof import (
    ReplayPlan,
    get_hex_multi_proof,
    get_multi_proof,
    get_proof_flags,
    get_proof_ids,
    plan_multiproof,
)

from .verifier import (
    verify_merkle_proof,
    verify_proof,
    verify_with_flags,
    verify_with_ids,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Core types
    "MerkleTree",
    "MerkleProof",
    "ReplayPlan",
    # Construction
    "hash_leaf",
    "canonicalize",
    "combine",
    "build_layers",
    "build_tree",
    "get_root",
    "get_hex_root",
    "elements",
    "pairs",
    # Single-leaf proofs
    "get_proof",
    "get_hex_proof",
    # Multiproofs
    "plan_multiproof",
    "get_multi_proof",
    "get_hex_multi_proof",
    "get_proof_flags",
    "get_proof_ids",
    # Verification
    "verify_with_flags",
    "verify_with_ids",
    "verify_merkle_proof",
    "verify_proof",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
