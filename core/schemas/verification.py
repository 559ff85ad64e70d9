"""
Schemas
File: verification.py

Purpose: Standard result format for sparse Merkle proof verification.
Lets callers tell a malformed proof apart from a well-formed proof that
does not reproduce the claimed root, while the public boolean API
collapses both to False.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .errors import ErrorCodes, SMTError


# Severity levels for checks
CheckSeverity = Literal["info", "error"]


class CheckResult(BaseModel):
    """
    Result of a single verification check.

    Checks are atomic verification steps that can pass or fail.
    """

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(
        ...,
        description="Unique identifier for this check",
        min_length=1,
    )
    ok: bool = Field(
        ...,
        description="Whether the check passed",
    )
    severity: CheckSeverity = Field(
        ...,
        description="Severity level of this check",
    )
    message: str = Field(
        ...,
        description="Human-readable message describing the result",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional details about the check",
    )

    @classmethod
    def passed(
        cls,
        check_id: str,
        message: str = "Check passed",
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        """Create a passed check result."""
        return cls(
            check_id=check_id,
            ok=True,
            severity="info",
            message=message,
            details=details or {},
        )

    @classmethod
    def failed(
        cls,
        check_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        """Create a failed check result."""
        return cls(
            check_id=check_id,
            ok=False,
            severity="error",
            message=message,
            details=details or {},
        )


class VerificationResult(BaseModel):
    """
    Complete result of verifying one proof against one root.

    `error.code` is ErrorCodes.MALFORMED_PROOF when the proof could not be
    decoded and ErrorCodes.ROOT_MISMATCH when the recomputed root differs.
    """

    model_config = ConfigDict(extra="forbid")

    ok: bool = Field(
        ...,
        description="Overall verification success",
    )
    checks: list[CheckResult] = Field(
        default_factory=list,
        description="Individual check results",
    )
    computed_root: str | None = Field(
        default=None,
        description="Hex of the root recomputed from the proof, if it could be decoded",
    )
    error: SMTError | None = Field(
        default=None,
        description="Error details if verification failed",
    )

    @property
    def is_malformed(self) -> bool:
        """True if the proof could not be decoded."""
        return self.error is not None and self.error.code == ErrorCodes.MALFORMED_PROOF

    @property
    def is_mismatch(self) -> bool:
        """True if the proof decoded but produced a different root."""
        return self.error is not None and self.error.code == ErrorCodes.ROOT_MISMATCH

    def get_failed_checks(self) -> list[CheckResult]:
        """Get all failed checks."""
        return [check for check in self.checks if not check.ok]

    @classmethod
    def success(
        cls,
        checks: list[CheckResult] | None = None,
        computed_root: str | None = None,
    ) -> "VerificationResult":
        """Create a successful verification result."""
        return cls(ok=True, checks=checks or [], computed_root=computed_root)

    @classmethod
    def failure(
        cls,
        checks: list[CheckResult],
        error: SMTError | None = None,
        computed_root: str | None = None,
    ) -> "VerificationResult":
        """Create a failed verification result."""
        return cls(
            ok=False,
            checks=checks,
            error=error,
            computed_root=computed_root,
        )
