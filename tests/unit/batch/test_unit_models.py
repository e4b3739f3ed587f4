# tests/unit/batch/test_unit_models.py - v1
"""Tests for batch/models.py and core/models.py outcome types."""

from __future__ import annotations

import pytest
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from caseintake.batch.models import BatchRunResult, ProgressSnapshot
from caseintake.core.models import (
    ExistingOutcome,
    FailedOutcome,
    OutcomeEvent,
    ProcessingOutcome,
    RecordSnapshot,
)


class TestOutcomeUnion:
    def test_discriminated_by_kind(self):
        adapter = TypeAdapter(ProcessingOutcome)
        outcome = adapter.validate_python({"kind": "failed", "reason": "x", "code": "E1"})
        assert isinstance(outcome, FailedOutcome)
        assert outcome.stage == "secondary"

    def test_unknown_kind_rejected(self):
        adapter = TypeAdapter(ProcessingOutcome)
        with pytest.raises(PydanticValidationError):
            adapter.validate_python({"kind": "lost"})

    def test_event_json_roundtrip_keeps_variant(self):
        event = OutcomeEvent(
            run_id="r", position=0, identifier="1001",
            outcome=ExistingOutcome(record=RecordSnapshot(status_label="Received")),
        )
        restored = OutcomeEvent.model_validate_json(event.model_dump_json())
        assert isinstance(restored.outcome, ExistingOutcome)
        assert restored.outcome.record.status_label == "Received"
        assert restored.is_terminal


class TestRecordSnapshot:
    def test_display_fallbacks(self):
        snap = RecordSnapshot()
        assert snap.display_status == "Unknown"
        assert snap.display_received_date == "N/A"
        assert snap.is_rush is None


class TestBatchRunResult:
    def test_create(self):
        result = BatchRunResult(
            run_id="r", mode="receive", snapshot=ProgressSnapshot(), duration_seconds=0.5,
        )
        assert result.cleared is False
        assert result.last_error is None
        assert not result.snapshot.is_complete

    def test_invalid_mode_rejected(self):
        with pytest.raises(PydanticValidationError):
            BatchRunResult(
                run_id="r", mode="ship", snapshot=ProgressSnapshot(), duration_seconds=0,
            )
