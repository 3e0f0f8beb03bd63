"""
Schemas
File: errors.py

Purpose: Error taxonomy for tree construction and proof generation.
Defines both a Pydantic model for structured error reporting
and Python exceptions for control flow.

Verification never raises: a bad proof is a False result, not an error.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Construction Errors
    EMPTY_INPUT = "EMPTY_INPUT"
    UNKNOWN_LEAF = "UNKNOWN_LEAF"

    # Encoding Errors
    PROOF_MISMATCH = "PROOF_MISMATCH"
    PROOF_SHAPE_UNSUPPORTED = "PROOF_SHAPE_UNSUPPORTED"

    # Configuration Errors
    UNSUPPORTED_HASH = "UNSUPPORTED_HASH"
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class MultiproofError(BaseModel):
    """
    Error model for structured error reporting (e.g. CLI JSON output).
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.UNKNOWN_LEAF],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MultiproofException(Exception):
    """
    Base exception for all multiproof errors.

    Carries structured error information and can be converted
    to a MultiproofError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "MULTIPROOF_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MultiproofError:
        """Convert this exception to a MultiproofError model."""
        return MultiproofError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EmptyInputError(MultiproofException):
    """Raised when a non-degenerate tree or proof is requested from no input."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_INPUT,
            details=details,
            retryable=False,
        )


class UnknownLeafError(MultiproofException):
    """Raised when a requested value's digest is not a leaf of the tree."""

    def __init__(
        self,
        message: str,
        leaf: bytes | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf is not None:
            full_details["leaf"] = "0x" + bytes(leaf).hex()
        super().__init__(
            message=message,
            code=ErrorCodes.UNKNOWN_LEAF,
            details=full_details,
            retryable=False,
        )
        self.leaf = leaf


class ProofMismatchError(MultiproofException):
    """Raised when a proof handed to an encoder was not generated for the requested leaves."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_MISMATCH,
            details=details,
            retryable=False,
        )


class ProofShapeError(MultiproofException):
    """Raised when a leaf set cannot be replayed through a single FIFO queue."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_SHAPE_UNSUPPORTED,
            details=details,
            retryable=False,
        )


class UnsupportedHashError(MultiproofException, ValueError):
    """Raised when a hash algorithm name is not registered."""

    def __init__(self, name: str, supported: list[str] | None = None) -> None:
        self.name = name
        self.supported = supported or []
        super().__init__(
            message=(
                f"Unsupported hash algorithm: '{name}'. "
                f"Supported algorithms: {self.supported}"
            ),
            code=ErrorCodes.UNSUPPORTED_HASH,
            details={"name": name, "supported": self.supported},
            retryable=False,
        )


__all__ = [
    "ErrorCodes",
    "MultiproofError",
    "MultiproofException",
    "EmptyInputError",
    "UnknownLeafError",
    "ProofMismatchError",
    "ProofShapeError",
    "UnsupportedHashError",
]
