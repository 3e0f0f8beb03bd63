"""
Schemas
File: __init__.py

Purpose: Export the error taxonomy, version constants and wire models.
"""

# Version constants
from .versioning import (
    SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    UnsupportedSchemaVersionError,
    assert_supported_schema_version,
)

# Error models and exceptions
from .errors import (
    EmptyInputError,
    ErrorCodes,
    MultiproofError,
    MultiproofException,
    ProofMismatchError,
    ProofShapeError,
    UnknownLeafError,
    UnsupportedHashError,
)

# Wire format
from .proof import (
    MultiProofPayload,
    ProofEncoding,
)

__all__ = [
    # Versioning
    "SCHEMA_VERSION",
    "SUPPORTED_SCHEMA_VERSIONS",
    "UnsupportedSchemaVersionError",
    "assert_supported_schema_version",
    # Errors
    "EmptyInputError",
    "ErrorCodes",
    "MultiproofError",
    "MultiproofException",
    "ProofMismatchError",
    "ProofShapeError",
    "UnknownLeafError",
    "UnsupportedHashError",
    # Wire format
    "MultiProofPayload",
    "ProofEncoding",
]
