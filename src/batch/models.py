# src/batch/models.py - v1
"""Batch run models: ProgressSnapshot, BatchRunResult."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from caseintake.core.models import OutcomeEvent

BatchMode = Literal["receive", "status_update"]


class ProgressSnapshot(BaseModel):
    """Read-only copy of the reporter state for the presentation layer.

    ``pending`` counts every submitted identifier without a terminal outcome
    (queued or in flight), so ``total_completed + pending == total_submitted``
    holds at all times. ``in_flight`` is the size of the pending bucket.
    """

    run_id: str | None = None
    total_submitted: int = 0
    total_completed: int = 0
    pending: int = 0
    in_flight: int = 0
    existing: int = 0
    resolved: int = 0
    failed: int = 0
    pending_bucket: list[OutcomeEvent] = Field(default_factory=list)
    existing_bucket: list[OutcomeEvent] = Field(default_factory=list)
    resolved_bucket: list[OutcomeEvent] = Field(default_factory=list)
    failed_bucket: list[OutcomeEvent] = Field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.total_submitted > 0 and self.pending == 0


class BatchRunResult(BaseModel):
    """Summary of one submitted batch."""

    run_id: str
    mode: BatchMode
    snapshot: ProgressSnapshot
    last_error: str | None = None
    cleared: bool = False
    duration_seconds: float
