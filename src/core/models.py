# src/core/models.py - v1
"""Shared Pydantic domain models used across modules.

Identifiers are plain digit strings. Every per-identifier classification is a
ProcessingOutcome, a union tagged on ``kind``; the processor wraps each one
in an OutcomeEvent addressed to a specific run and input position.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

# Opaque case/order identifier (validated by batch.parser).
Identifier = str

UNKNOWN_STATUS = "Unknown"
UNKNOWN_DATE = "N/A"


# === LOOKUP RESULTS ===


class RecordSnapshot(BaseModel):
    """Subset of a local system-of-record entry attached to an Existing outcome."""

    status_label: str | None = None
    received_date: str | None = None
    is_rush: bool | None = None
    raw: dict[str, Any] = Field(default_factory=dict)

    @property
    def display_status(self) -> str:
        return self.status_label or UNKNOWN_STATUS

    @property
    def display_received_date(self) -> str:
        return self.received_date or UNKNOWN_DATE


class ExistenceCheck(BaseModel):
    """Result of the primary lookup."""

    exists: bool
    record: RecordSnapshot | None = None


class ExternalFetch(BaseModel):
    """Result of the secondary lookup. ``success=False`` is an expected outcome."""

    success: bool
    payload: dict[str, Any] | None = None
    message: str | None = None
    code: str | None = None


# === OUTCOMES ===


class ExistingOutcome(BaseModel):
    """Identifier already known locally."""

    kind: Literal["existing"] = "existing"
    record: RecordSnapshot = Field(default_factory=RecordSnapshot)


class PendingLookupOutcome(BaseModel):
    """Transient state while lookups for the identifier are in flight."""

    kind: Literal["pending"] = "pending"


class ResolvedOutcome(BaseModel):
    """Unknown identifier enriched from the external source."""

    kind: Literal["resolved"] = "resolved"
    payload: dict[str, Any] = Field(default_factory=dict)


class FailedOutcome(BaseModel):
    """Identifier that could not be classified as existing or resolved."""

    kind: Literal["failed"] = "failed"
    reason: str
    code: str | None = None
    stage: Literal["primary", "secondary"] = "secondary"


ProcessingOutcome = Annotated[
    Union[ExistingOutcome, PendingLookupOutcome, ResolvedOutcome, FailedOutcome],
    Field(discriminator="kind"),
]

OutcomeKind = Literal["existing", "pending", "resolved", "failed"]
TERMINAL_KINDS: frozenset[str] = frozenset({"existing", "resolved", "failed"})


class OutcomeEvent(BaseModel):
    """One step of a run: ``outcome`` for the identifier at ``position``."""

    run_id: str
    position: int
    identifier: Identifier
    outcome: ProcessingOutcome

    @property
    def is_terminal(self) -> bool:
        return self.outcome.kind in TERMINAL_KINDS
