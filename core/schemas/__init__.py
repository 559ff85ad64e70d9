"""
Schemas
File: __init__.py

Purpose: Export the public API for the schemas module: error taxonomy,
verification results and the proof envelope.
"""

# Error models and exceptions
from .errors import (
    ConfigurationException,
    ErrorCodes,
    MalformedProofException,
    SMTError,
    SMTException,
    TreeConstructionException,
    VerificationMismatchException,
)

# Verification results
from .verification import (
    CheckResult,
    CheckSeverity,
    VerificationResult,
)

# Proof envelope
from .proof import ProofEnvelope


__all__ = [
    # Errors
    "ErrorCodes",
    "SMTError",
    "SMTException",
    "TreeConstructionException",
    "MalformedProofException",
    "VerificationMismatchException",
    "ConfigurationException",
    # Verification
    "CheckResult",
    "CheckSeverity",
    "VerificationResult",
    # Proof
    "ProofEnvelope",
]
