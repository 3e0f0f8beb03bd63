"""
Core cryptographic utilities.

Hash primitives used to build and verify Merkle multiproofs.
"""
from .hashing import (
    DIGEST_SIZE,
    HASHERS,
    Hasher,
    keccak256,
    sha256,
    get_hasher,
    hasher_name,
    to_hex,
    from_hex,
    hash_pair,
)

__all__ = [
    "DIGEST_SIZE",
    "HASHERS",
    "Hasher",
    "keccak256",
    "sha256",
    "get_hasher",
    "hasher_name",
    "to_hex",
    "from_hex",
    "hash_pair",
]
