"""
Schemas
File: errors.py

Purpose: Standard error taxonomy for sparse Merkle tree construction and
proof verification. Defines both Pydantic models for structured error
communication and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Construction Errors
    INVALID_DEPTH = "INVALID_DEPTH"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    INVALID_LEAF = "INVALID_LEAF"

    # Proof & Verification Errors
    MALFORMED_PROOF = "MALFORMED_PROOF"
    ROOT_MISMATCH = "ROOT_MISMATCH"

    # Configuration Errors
    CONFIG_ERROR = "CONFIG_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class SMTError(BaseModel):
    """
    Base error model for structured error communication.

    Used to report failures (e.g. in CLI JSON output or in a
    VerificationResult) without raising.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.MALFORMED_PROOF],
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

    def to_exception(self) -> "SMTException":
        """Convert this error model to a raised exception."""
        return SMTException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class SMTException(Exception):
    """
    Base exception for all sparse Merkle tree errors.

    Carries structured error information and can be converted to/from
    SMTError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "SMT_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> SMTError:
        """Convert this exception to an SMTError model."""
        return SMTError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class TreeConstructionException(SMTException):
    """Exception raised when a tree cannot be built (bad depth, index or leaf)."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.INVALID_DEPTH,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details=details,
            retryable=False,
        )


class MalformedProofException(SMTException):
    """Exception raised when a proof cannot be decoded."""

    def __init__(
        self,
        message: str,
        proof_length: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if proof_length is not None:
            full_details["proof_length"] = proof_length
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_PROOF,
            details=full_details,
            retryable=False,
        )


class VerificationMismatchException(SMTException):
    """Exception raised when a well-formed proof yields a different root."""

    def __init__(
        self,
        message: str,
        index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if index is not None:
            full_details["index"] = index
        super().__init__(
            message=message,
            code=ErrorCodes.ROOT_MISMATCH,
            details=full_details,
            retryable=False,
        )


class ConfigurationException(SMTException):
    """Exception raised when tree or CLI configuration is invalid."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIG_ERROR,
            details=details,
            retryable=False,
        )
