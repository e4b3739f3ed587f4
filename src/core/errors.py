# src/core/errors.py - v1
"""Exception hierarchy shared by the parser, lookup clients and batch layer."""

from __future__ import annotations


class IntakeError(Exception):
    """Base class for all caseintake errors."""


class ValidationError(IntakeError):
    """Submitted input contains no valid identifiers. Raised before any lookup."""

    def __init__(self, message: str = "no valid identifiers") -> None:
        super().__init__(message)


class BatchInProgressError(IntakeError):
    """A batch was submitted while another run is still live."""

    def __init__(self, run_id: str) -> None:
        self.run_id = run_id
        super().__init__(f"Batch {run_id} is still running")


class TransportError(IntakeError):
    """Network, server or protocol failure talking to a lookup backend."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class AuthenticationError(TransportError):
    """Backend rejected the configured credentials (HTTP 401)."""

    def __init__(self, message: str = "Authentication failed. Please login again.") -> None:
        super().__init__(message, status_code=401, code="UNAUTHORIZED")


class PrimaryLookupError(IntakeError):
    """The existence check for one identifier failed."""

    reason = "primary lookup error"

    def __init__(self, identifier: str, cause: Exception) -> None:
        self.identifier = identifier
        self.cause = cause
        super().__init__(f"Error processing case {identifier}: {cause}")


class SecondaryLookupError(IntakeError):
    """The enrichment lookup for one identifier failed."""

    def __init__(self, identifier: str, reason: str, code: str | None = None) -> None:
        self.identifier = identifier
        self.reason = reason
        self.code = code
        super().__init__(f"Lookup failed for case {identifier}: {reason}")
