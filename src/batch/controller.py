# src/batch/controller.py - v1
"""Batch controller: owns the single live BatchRun.

Submitting while a run is live is rejected with BatchInProgressError.
``clear()`` resets the reporter at any time; the live run stops after its
in-flight lookup returns, and its remaining events are never attributed to
the cleared buckets.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable, Iterable

from caseintake.batch.models import BatchMode, BatchRunResult
from caseintake.batch.parser import filter_identifiers, parse_identifiers
from caseintake.batch.processor import BatchProcessor
from caseintake.batch.reporter import ProgressReporter
from caseintake.core.errors import BatchInProgressError
from caseintake.core.models import Identifier, OutcomeEvent
from caseintake.logging.context import clear_context
from caseintake.lookup.base_client import BaseLookupClient

logger = logging.getLogger(__name__)

ProgressSink = Callable[[OutcomeEvent, ProgressReporter], None]


class BatchController:
    """Parse, run and report one batch at a time.

    Args:
        lookup_client: Backend used for both lookups.
        reporter: Progress reporter to feed. A fresh one is created if None.
        mode: ``receive`` (existence check then enrichment) or
            ``status_update`` (existence check only).
        on_event: Optional progress sink called after each applied event.
    """

    def __init__(
        self,
        lookup_client: BaseLookupClient,
        reporter: ProgressReporter | None = None,
        mode: BatchMode = "receive",
        on_event: ProgressSink | None = None,
    ) -> None:
        self._client = lookup_client
        self._reporter = reporter or ProgressReporter()
        self._mode = mode
        self._on_event = on_event
        self._active_run_id: str | None = None
        self._clear_requested = False
        self._last_error: str | None = None

    @property
    def reporter(self) -> ProgressReporter:
        return self._reporter

    @property
    def is_running(self) -> bool:
        return self._active_run_id is not None

    @property
    def last_error(self) -> str | None:
        return self._last_error

    async def submit(self, batch: str | Iterable[Identifier]) -> BatchRunResult:
        """Run one batch to completion.

        Args:
            batch: Raw input text, or already-split identifiers. Elements
                that are not digits-only strings are dropped.

        Returns:
            BatchRunResult with the final snapshot. ``cleared`` is True when
            ``clear()`` was called before the run finished.

        Raises:
            BatchInProgressError: If another run is live.
            ValidationError: If the batch holds no valid identifiers.
        """
        if self._active_run_id is not None:
            raise BatchInProgressError(self._active_run_id)

        if isinstance(batch, str):
            identifiers = parse_identifiers(batch)
        else:
            identifiers = filter_identifiers(batch)
        run_id = uuid.uuid4().hex
        processor = BatchProcessor(self._client, mode=self._mode)
        events = processor.run_batch(identifiers, run_id=run_id)

        self._active_run_id = run_id
        self._clear_requested = False
        self._last_error = None
        self._reporter.begin_run(run_id, identifiers)
        t0 = time.perf_counter()

        try:
            async for event in events:
                applied = self._reporter.apply(event)
                if not self._clear_requested:
                    self._last_error = processor.last_error
                if applied and self._on_event is not None:
                    self._on_event(event, self._reporter)
                if self._clear_requested:
                    logger.info("Run %s cleared, stopping after %s", run_id, event.identifier)
                    break
        finally:
            await events.aclose()
            self._active_run_id = None
            clear_context()

        duration = round(time.perf_counter() - t0, 3)
        cleared = self._clear_requested
        snapshot = self._reporter.snapshot()
        logger.info(
            "Run %s done in %.2fs: existing=%d resolved=%d failed=%d%s",
            run_id, duration, snapshot.existing, snapshot.resolved, snapshot.failed,
            " (cleared)" if cleared else "",
        )
        return BatchRunResult(
            run_id=run_id,
            mode=self._mode,
            snapshot=snapshot,
            last_error=self._last_error,
            cleared=cleared,
            duration_seconds=duration,
        )

    def clear(self) -> None:
        """Reset buckets, counters and the error banner. Safe to call mid-run."""
        if self._active_run_id is not None:
            self._clear_requested = True
        self._last_error = None
        self._reporter.reset()
