"""
Schemas
File: proof.py

Purpose: Wire format for a multiproof handed to an external verifier.

Every field is an explicit array or scalar; nothing depends on the tree
that produced it. Digests travel as 0x-prefixed lowercase hex.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .versioning import SCHEMA_VERSION, assert_supported_schema_version


# 0x + 32 bytes
_DIGEST_HEX_RE = re.compile(r"^0x[0-9a-f]{64}$")

ProofEncoding = Literal["flags", "ids", "both"]


def _check_digest_hex(value: str) -> str:
    value = value.lower()
    if not _DIGEST_HEX_RE.match(value):
        raise ValueError(f"Expected 0x-prefixed 32-byte hex digest, got: {value[:18]}...")
    return value


class MultiProofPayload(BaseModel):
    """
    A multiproof as transmitted to a verifier.

    At least one of ``flags`` / ``ids`` must be present. ``leaves`` are the
    leaf digests being proven (sorted order is not required here, verifiers
    sort them).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: str = Field(default=SCHEMA_VERSION)
    hash_algorithm: str = Field(
        default="keccak256",
        description="Registered hasher name used for leaves and combinations",
        min_length=1,
    )
    root: str = Field(..., description="Claimed tree root")
    leaves: list[str] = Field(..., description="Leaf digests being proven", min_length=1)
    proof: list[str] = Field(default_factory=list, description="Sibling digests in consumption order")
    flags: list[bool] | None = Field(default=None, description="Boolean replay tape")
    ids: list[int] | None = Field(default=None, description="Flattened operand index pairs")

    @field_validator("schema_version")
    @classmethod
    def _supported_version(cls, v: str) -> str:
        assert_supported_schema_version(v)
        return v

    @field_validator("root")
    @classmethod
    def _root_hex(cls, v: str) -> str:
        return _check_digest_hex(v)

    @field_validator("leaves", "proof")
    @classmethod
    def _digests_hex(cls, v: list[str]) -> list[str]:
        return [_check_digest_hex(item) for item in v]

    @model_validator(mode="after")
    def _has_encoding(self) -> "MultiProofPayload":
        if self.flags is None and self.ids is None:
            raise ValueError("Payload must carry flags, ids, or both")
        return self

    @property
    def encoding(self) -> ProofEncoding:
        if self.flags is not None and self.ids is not None:
            return "both"
        return "flags" if self.flags is not None else "ids"

    def root_bytes(self) -> bytes:
        return bytes.fromhex(self.root[2:])

    def leaf_bytes(self) -> list[bytes]:
        return [bytes.fromhex(item[2:]) for item in self.leaves]

    def proof_bytes(self) -> list[bytes]:
        return [bytes.fromhex(item[2:]) for item in self.proof]


__all__ = [
    "MultiProofPayload",
    "ProofEncoding",
]
