# src/batch/reporter.py - v1
"""Progress reporter: folds outcome events into named buckets and counters.

The reporter is keyed to one run at a time. Events carrying another run id
are dropped, which is how ``reset()`` stops a discarded run from leaking into
fresh buckets. Every mutation happens inside a single synchronous
``apply()`` call, so a reader never sees a completed identifier that is
missing from its bucket.

Per-position state machine::

    unsubmitted -> pending -> existing | resolved | failed
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from caseintake.batch.models import ProgressSnapshot
from caseintake.core.models import TERMINAL_KINDS, Identifier, OutcomeEvent

logger = logging.getLogger(__name__)

_UNSUBMITTED = "unsubmitted"


class ProgressReporter:
    """Single-writer accumulator of one run's outcomes."""

    def __init__(self) -> None:
        self._run_id: str | None = None
        self._identifiers: tuple[Identifier, ...] = ()
        self._states: list[str] = []
        self._buckets: dict[str, list[OutcomeEvent]] = {
            "pending": [], "existing": [], "resolved": [], "failed": [],
        }
        self._completed = 0

    # --- Lifecycle ---

    def begin_run(self, run_id: str, identifiers: Iterable[Identifier]) -> None:
        """Clear state and attach the reporter to ``run_id``."""
        self.reset()
        self._run_id = run_id
        self._identifiers = tuple(identifiers)
        self._states = [_UNSUBMITTED] * len(self._identifiers)

    def reset(self) -> None:
        """Clear all buckets and counters and detach from the current run."""
        self._run_id = None
        self._identifiers = ()
        self._states = []
        for bucket in self._buckets.values():
            bucket.clear()
        self._completed = 0

    def apply(self, event: OutcomeEvent) -> bool:
        """Record one event. Returns False when the event was dropped."""
        if self._run_id is None or event.run_id != self._run_id:
            logger.debug(
                "Dropping event for inactive run %s (%s)", event.run_id, event.identifier,
            )
            return False

        position = event.position
        if not 0 <= position < len(self._states) or (
            self._identifiers[position] != event.identifier
        ):
            logger.warning(
                "Dropping event with unknown position %d (%s)", position, event.identifier,
            )
            return False

        current = self._states[position]
        kind = event.outcome.kind

        if current in TERMINAL_KINDS:
            logger.warning(
                "Ignoring %s for %s: already %s", kind, event.identifier, current,
            )
            return False

        if kind == "pending":
            if current == "pending":
                return False
            self._states[position] = "pending"
            self._buckets["pending"].append(event)
            return True

        if current == "pending":
            pending = self._buckets["pending"]
            pending[:] = [e for e in pending if e.position != position]
        self._states[position] = kind
        self._buckets[kind].append(event)
        self._completed += 1
        return True

    # --- Read-only views ---

    @property
    def run_id(self) -> str | None:
        return self._run_id

    @property
    def pending(self) -> tuple[OutcomeEvent, ...]:
        return tuple(self._buckets["pending"])

    @property
    def existing(self) -> tuple[OutcomeEvent, ...]:
        return tuple(self._buckets["existing"])

    @property
    def resolved(self) -> tuple[OutcomeEvent, ...]:
        return tuple(self._buckets["resolved"])

    @property
    def failed(self) -> tuple[OutcomeEvent, ...]:
        return tuple(self._buckets["failed"])

    @property
    def total_submitted(self) -> int:
        return len(self._identifiers)

    @property
    def total_completed(self) -> int:
        return self._completed

    @property
    def pending_count(self) -> int:
        return self.total_submitted - self._completed

    @property
    def in_flight(self) -> int:
        return len(self._buckets["pending"])

    @property
    def is_complete(self) -> bool:
        return self.total_submitted > 0 and self.pending_count == 0

    def snapshot(self) -> ProgressSnapshot:
        """Copy of the current buckets and counters."""
        return ProgressSnapshot(
            run_id=self._run_id,
            total_submitted=self.total_submitted,
            total_completed=self._completed,
            pending=self.pending_count,
            in_flight=self.in_flight,
            existing=len(self._buckets["existing"]),
            resolved=len(self._buckets["resolved"]),
            failed=len(self._buckets["failed"]),
            pending_bucket=list(self._buckets["pending"]),
            existing_bucket=list(self._buckets["existing"]),
            resolved_bucket=list(self._buckets["resolved"]),
            failed_bucket=list(self._buckets["failed"]),
        )
