# tests/unit/core/test_unit_errors.py - v1
"""Tests for core/errors.py: exception hierarchy and messages."""

from __future__ import annotations

from caseintake.core.errors import (
    AuthenticationError,
    BatchInProgressError,
    IntakeError,
    PrimaryLookupError,
    SecondaryLookupError,
    TransportError,
    ValidationError,
)


class TestHierarchy:
    def test_all_derive_from_intake_error(self):
        for cls in (
            ValidationError, BatchInProgressError, TransportError,
            PrimaryLookupError, SecondaryLookupError,
        ):
            assert issubclass(cls, IntakeError)

    def test_authentication_is_transport(self):
        err = AuthenticationError()
        assert isinstance(err, TransportError)
        assert err.status_code == 401
        assert err.code == "UNAUTHORIZED"


class TestMessages:
    def test_validation_default(self):
        assert str(ValidationError()) == "no valid identifiers"

    def test_primary_lookup_message(self):
        err = PrimaryLookupError("1001", RuntimeError("timeout"))
        assert str(err) == "Error processing case 1001: timeout"
        assert err.reason == "primary lookup error"

    def test_secondary_lookup_fields(self):
        err = SecondaryLookupError("3003", "order not found", "NOT_FOUND")
        assert err.reason == "order not found"
        assert err.code == "NOT_FOUND"
        assert "3003" in str(err)

    def test_transport_fields(self):
        err = TransportError("HTTP 502: Bad Gateway", status_code=502)
        assert err.message == "HTTP 502: Bad Gateway"
        assert err.code is None

    def test_batch_in_progress_carries_run_id(self):
        assert BatchInProgressError("abc").run_id == "abc"
