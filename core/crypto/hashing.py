"""
Hashing Utilities
Hash primitives and hex helpers for Merkle multiproofs.

This module provides:
- keccak256 (default, EVM-compatible) and sha256 over raw bytes
- A small registry so configuration can select a hasher by name
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Hashers take raw bytes and return 32-byte digests
- Strings are never hashed implicitly here; callers encode first
"""
from __future__ import annotations

import hashlib
from typing import Callable

from eth_utils import keccak

from core.schemas.errors import UnsupportedHashError


Hasher = Callable[[bytes], bytes]

# All supported hashers produce digests of this width
DIGEST_SIZE: int = 32


def keccak256(data: bytes) -> bytes:
    """
    Compute the Keccak-256 hash of raw bytes (Ethereum flavour).

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte Keccak-256 digest

    Example:
        >>> keccak256(b"").hex()[:8]
        'c5d24601'
    """
    return keccak(data)


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest
    """
    return hashlib.sha256(data).digest()


HASHERS: dict[str, Hasher] = {
    "keccak256": keccak256,
    "sha256": sha256,
}


def get_hasher(name: str) -> Hasher:
    """
    Resolve a hasher by its registered name.

    Raises:
        UnsupportedHashError: If no hasher is registered under ``name``
    """
    try:
        return HASHERS[name.lower()]
    except KeyError:
        raise UnsupportedHashError(name, sorted(HASHERS)) from None


def hasher_name(hasher: Hasher) -> str:
    """Reverse lookup of a registered hasher; raises UnsupportedHashError."""
    for name, candidate in HASHERS.items():
        if candidate is hasher:
            return name
    raise UnsupportedHashError(getattr(hasher, "__name__", repr(hasher)), sorted(HASHERS))


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + bytes(data).hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def hash_pair(left: bytes, right: bytes, hasher: Hasher = keccak256) -> bytes:
    """
    Hash two digests in byte order.

    The smaller operand always comes first, so ``hash_pair(a, b)`` equals
    ``hash_pair(b, a)``. Generator and verifier both go through here.
    """
    if right < left:
        left, right = right, left
    return hasher(left + right)


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
