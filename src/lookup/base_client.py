# src/lookup/base_client.py - v1
"""Abstract lookup client interface consumed by the batch processor."""

from __future__ import annotations

from abc import ABC, abstractmethod

from caseintake.core.models import ExistenceCheck, ExternalFetch, Identifier


class BaseLookupClient(ABC):
    """Unified interface for all lookup backends.

    Both operations raise ``TransportError`` on network or server failure.
    A ``success=False`` fetch result is a normal outcome and is returned,
    not raised.
    """

    @abstractmethod
    async def check_existing(self, identifier: Identifier) -> ExistenceCheck:
        """Primary lookup: is the identifier already in the system of record?"""

    @abstractmethod
    async def fetch_external(self, identifier: Identifier) -> ExternalFetch:
        """Secondary lookup: fetch authoritative data from the external source."""

    @property
    @abstractmethod
    def client_name(self) -> str:
        """Backend identifier (http, memory, ...)."""

    async def aclose(self) -> None:
        """Release transport resources. No-op by default."""

    async def __aenter__(self) -> BaseLookupClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
