# src/batch/processor.py - v1
"""Batch processor: drives identifiers one at a time through the lookup sequence.

Workflow per identifier, strictly in input order:
    1. Emit ``pending``
    2. Primary lookup (existence check)
       - exists            -> ``existing``, next identifier
       - lookup raised     -> ``failed`` (stage=primary), next identifier
    3. Secondary lookup (external enrichment), ``receive`` mode only
       - success           -> ``resolved``
       - failure or raised -> ``failed`` (stage=secondary)

No per-identifier error escapes the processor. Only an empty batch is
rejected, before any lookup is issued.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import AsyncGenerator, Iterable

from caseintake.batch.models import BatchMode
from caseintake.batch.parser import filter_identifiers
from caseintake.core.errors import (
    PrimaryLookupError,
    SecondaryLookupError,
    ValidationError,
)
from caseintake.core.models import (
    ExistingOutcome,
    FailedOutcome,
    Identifier,
    OutcomeEvent,
    PendingLookupOutcome,
    RecordSnapshot,
    ResolvedOutcome,
)
from caseintake.logging.context import (
    clear_context,
    set_identifier_context,
    set_run_context,
)
from caseintake.lookup.base_client import BaseLookupClient

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_REASON = "external lookup failed"
DEFAULT_FAILURE_CODE = "UNKNOWN_ERROR"
DEFAULT_EXCEPTION_REASON = "order not found in external source"
NOT_FOUND_REASON = "case not found in database"
NOT_FOUND_CODE = "NOT_FOUND"

Outcome = ExistingOutcome | ResolvedOutcome | FailedOutcome


class BatchProcessor:
    """Sequential per-identifier state machine over a lookup client.

    ``last_error`` keeps the most recent per-identifier error message of the
    current run for a single-line diagnostic banner. The per-item reason on
    each ``failed`` outcome is the complete record.
    """

    def __init__(
        self,
        lookup_client: BaseLookupClient,
        mode: BatchMode = "receive",
    ) -> None:
        self._client = lookup_client
        self._mode = mode
        self.last_error: str | None = None

    @property
    def mode(self) -> BatchMode:
        return self._mode

    def run_batch(
        self,
        identifiers: Iterable[Identifier],
        run_id: str | None = None,
    ) -> AsyncGenerator[OutcomeEvent, None]:
        """Validate the batch and return its event stream.

        Elements that are not digits-only strings are dropped before any
        lookup. Validation happens eagerly, so a batch with nothing left
        raises here rather than on first iteration.

        Raises:
            ValidationError: If no valid identifier remains.
        """
        items = list(identifiers)
        batch = filter_identifiers(items)
        if not batch:
            raise ValidationError("no valid identifiers")
        if len(batch) < len(items):
            logger.warning(
                "Dropped %d invalid identifier(s) from batch", len(items) - len(batch),
            )

        self.last_error = None
        return self._iterate(run_id or uuid.uuid4().hex, batch)

    async def _iterate(
        self, run_id: str, identifiers: list[Identifier],
    ) -> AsyncGenerator[OutcomeEvent, None]:
        set_run_context(run_id)
        try:
            logger.info(
                "Starting batch: %d identifiers (mode=%s, backend=%s)",
                len(identifiers), self._mode, self._client.client_name,
            )

            for position, identifier in enumerate(identifiers):
                yield OutcomeEvent(
                    run_id=run_id, position=position, identifier=identifier,
                    outcome=PendingLookupOutcome(),
                )
                outcome = await self._classify(identifier)
                yield OutcomeEvent(
                    run_id=run_id, position=position, identifier=identifier,
                    outcome=outcome,
                )

            set_identifier_context(None)
            logger.info("Batch finished: %d identifiers", len(identifiers))
        finally:
            clear_context()

    async def _classify(self, identifier: Identifier) -> Outcome:
        set_identifier_context(identifier, "primary")
        try:
            check = await self._client.check_existing(identifier)
        except Exception as exc:  # noqa: BLE001
            error = PrimaryLookupError(identifier, exc)
            self.last_error = str(error)
            logger.warning("%s", error)
            return FailedOutcome(
                reason=PrimaryLookupError.reason,
                code=getattr(exc, "code", None),
                stage="primary",
            )

        if check.exists:
            logger.debug("Case %s already exists", identifier)
            return ExistingOutcome(record=check.record or RecordSnapshot())

        if self._mode == "status_update":
            logger.info("Case %s not found", identifier)
            return FailedOutcome(
                reason=NOT_FOUND_REASON, code=NOT_FOUND_CODE, stage="primary",
            )

        set_identifier_context(identifier, "secondary")
        try:
            result = await self._client.fetch_external(identifier)
        except Exception as exc:  # noqa: BLE001
            failure = SecondaryLookupError(
                identifier,
                reason=str(exc) or DEFAULT_EXCEPTION_REASON,
                code=getattr(exc, "code", None),
            )
        else:
            if result.success:
                logger.debug("Case %s resolved from external source", identifier)
                return ResolvedOutcome(payload=result.payload or {})
            failure = SecondaryLookupError(
                identifier,
                reason=result.message or DEFAULT_FAILURE_REASON,
                code=result.code or DEFAULT_FAILURE_CODE,
            )

        self.last_error = str(failure)
        logger.warning("%s (code=%s)", failure, failure.code)
        return FailedOutcome(reason=failure.reason, code=failure.code, stage="secondary")
