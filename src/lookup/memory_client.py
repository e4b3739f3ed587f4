# src/lookup/memory_client.py - v1
"""In-memory lookup adapter backed by plain dictionaries.

Used for dry runs against a JSON fixture file and in tests. Fixture layout::

    {
      "records":  {"1001": {"Status_Streamline_Options": "Received", ...}},
      "orders":   {"2002": {"id": 2002, "name": "#2002"}},
      "failures": {"3003": {"message": "order not found", "code": "NOT_FOUND"}},
      "transport_errors": {"4004": "connection reset"}
    }

Identifiers absent from ``orders`` and ``failures`` fail the external
lookup with a generic not-found result.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from caseintake.core.errors import TransportError
from caseintake.core.models import ExistenceCheck, ExternalFetch, Identifier
from caseintake.lookup.base_client import BaseLookupClient
from caseintake.lookup.http_client import _snapshot_from_case_data

logger = logging.getLogger(__name__)


class InMemoryLookupClient(BaseLookupClient):
    """Dictionary-backed lookup client. Records every call in ``calls``."""

    def __init__(
        self,
        records: dict[str, dict[str, Any]] | None = None,
        orders: dict[str, dict[str, Any]] | None = None,
        failures: dict[str, dict[str, Any]] | None = None,
        transport_errors: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        self._records = dict(records or {})
        self._orders = dict(orders or {})
        self._failures = dict(failures or {})
        self._transport_errors = dict(transport_errors or {})
        self.calls: list[tuple[str, Identifier]] = []

    @classmethod
    def from_file(cls, path: Path | str) -> InMemoryLookupClient:
        """Load a fixture file (see module docstring for layout)."""
        path = Path(path).expanduser()
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Fixture file must contain a JSON object: {path}")
        logger.debug("Loaded lookup fixtures from %s", path)
        return cls(
            records=data.get("records"),
            orders=data.get("orders"),
            failures=data.get("failures"),
            transport_errors=data.get("transport_errors"),
        )

    @property
    def client_name(self) -> str:
        return "memory"

    async def check_existing(self, identifier: Identifier) -> ExistenceCheck:
        self.calls.append(("check_existing", identifier))
        if identifier in self._records:
            return ExistenceCheck(
                exists=True,
                record=_snapshot_from_case_data(self._records[identifier]),
            )
        return ExistenceCheck(exists=False)

    async def fetch_external(self, identifier: Identifier) -> ExternalFetch:
        self.calls.append(("fetch_external", identifier))
        if identifier in self._transport_errors:
            raise TransportError(self._transport_errors[identifier])
        if identifier in self._orders:
            return ExternalFetch(success=True, payload=self._orders[identifier])

        failure = self._failures.get(identifier, {})
        return ExternalFetch(
            success=False,
            message=failure.get("message", "order not found"),
            code=failure.get("code", "NOT_FOUND"),
        )
