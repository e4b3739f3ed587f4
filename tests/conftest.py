# tests/conftest.py - v1
"""Shared test fixtures for all unit and integration tests.

Provides an in-memory lookup client seeded with one identifier per outcome
(existing 1001, resolvable 2002, unresolvable 3003) and AsyncMock clients.
No network access: all I/O is mocked.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from caseintake.core.models import ExistenceCheck, ExternalFetch, RecordSnapshot
from caseintake.lookup.base_client import BaseLookupClient
from caseintake.lookup.memory_client import InMemoryLookupClient


# === FIXTURES: Sample data ===


@pytest.fixture
def case_record() -> dict:
    """Raw system-of-record entry as returned by the backend."""
    return {
        "Case_ID": 1001,
        "Status_Streamline_Options": "Received",
        "Case_Date_Received": "2024-01-15",
        "IsRushOrder": True,
    }


@pytest.fixture
def order_payload() -> dict:
    return {"id": 2002, "name": "#2002", "customer": {"email": "a@example.com"}}


@pytest.fixture
def memory_client(case_record: dict, order_payload: dict) -> InMemoryLookupClient:
    return InMemoryLookupClient(
        records={"1001": case_record},
        orders={"2002": order_payload},
        failures={"3003": {"message": "order not found", "code": "NOT_FOUND"}},
    )


@pytest.fixture
def mixed_input() -> str:
    return "1001\n2002\n3003\nabc\n"


# === FIXTURES: Mock clients ===


@pytest.fixture
def mock_lookup_client() -> AsyncMock:
    """AsyncMock lookup client: every identifier is unknown and resolvable."""
    client = AsyncMock(spec=BaseLookupClient)
    client.client_name = "mock"
    client.check_existing.return_value = ExistenceCheck(exists=False)
    client.fetch_external.return_value = ExternalFetch(success=True, payload={"ok": True})
    return client


@pytest.fixture
def existing_snapshot() -> RecordSnapshot:
    return RecordSnapshot(status_label="Received", received_date="2024-01-15", is_rush=False)
