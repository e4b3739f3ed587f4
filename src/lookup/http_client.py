# src/lookup/http_client.py - v1
"""HTTP lookup adapter for the dashboard backend API.

Both lookups are JSON POSTs answered with an envelope of the form
``{"status": "success" | "error", "data": {...}, "message": ..., "code": ...}``:

    POST {base}/cases/receive-case   {"caseId": id}
        -> data.exists, data.caseData (Status_Streamline_Options,
           Case_Date_Received, IsRushOrder)
    POST {base}/shopify/fetch-order  {"orderId": id}
        -> data.orderData
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from caseintake.core.errors import AuthenticationError, TransportError
from caseintake.core.models import (
    ExistenceCheck,
    ExternalFetch,
    Identifier,
    RecordSnapshot,
)
from caseintake.lookup.base_client import BaseLookupClient
from caseintake.lookup.retry import RetryConfig, with_retry

logger = logging.getLogger(__name__)

RECEIVE_CASE_ENDPOINT = "/cases/receive-case"
FETCH_ORDER_ENDPOINT = "/shopify/fetch-order"


def _snapshot_from_case_data(case_data: dict[str, Any] | None) -> RecordSnapshot:
    case_data = case_data or {}
    rush = case_data.get("IsRushOrder")
    return RecordSnapshot(
        status_label=case_data.get("Status_Streamline_Options") or None,
        received_date=case_data.get("Case_Date_Received") or None,
        is_rush=bool(rush) if rush is not None else None,
        raw=case_data,
    )


class HttpLookupClient(BaseLookupClient):
    """Lookup client backed by the dashboard REST API."""

    def __init__(
        self,
        base_url: str = "http://localhost:5000/api",
        auth_token: str = "",
        timeout_seconds: float = 30.0,
        verify_ssl: bool = True,
        user_agent: str = "",
        retry_config: RetryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._auth_token = auth_token
        self._timeout = timeout_seconds
        self._verify = verify_ssl
        self._user_agent = user_agent
        self._retry_config = retry_config or RetryConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client_name(self) -> str:
        return "http"

    async def check_existing(self, identifier: Identifier) -> ExistenceCheck:
        status_code, body = await with_retry(
            self._post, RECEIVE_CASE_ENDPOINT, {"caseId": identifier},
            operation=f"receive-case {identifier}",
            config=self._retry_config,
        )
        if body.get("status") != "success":
            raise TransportError(
                body.get("message") or f"Unexpected response status: {body.get('status')!r}",
                status_code=status_code,
                code=body.get("code"),
            )

        data = body.get("data") or {}
        if not data.get("exists"):
            return ExistenceCheck(exists=False)
        return ExistenceCheck(
            exists=True, record=_snapshot_from_case_data(data.get("caseData")),
        )

    async def fetch_external(self, identifier: Identifier) -> ExternalFetch:
        status_code, body = await with_retry(
            self._post, FETCH_ORDER_ENDPOINT, {"orderId": identifier},
            operation=f"fetch-order {identifier}",
            config=self._retry_config,
            allow_error_body=True,
        )
        if body.get("status") == "success":
            data = body.get("data") or {}
            return ExternalFetch(success=True, payload=data.get("orderData") or {})

        logger.debug(
            "fetch-order %s returned status=%s (HTTP %d)",
            identifier, body.get("status"), status_code,
        )
        return ExternalFetch(
            success=False, message=body.get("message"), code=body.get("code"),
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # --- Transport ---

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._auth_token:
            headers["Authorization"] = f"Bearer {self._auth_token}"
        if self._user_agent:
            headers["User-Agent"] = self._user_agent
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            kwargs: dict[str, Any] = {
                "base_url": self._base_url,
                "timeout": self._timeout,
                "headers": self._headers(),
                "trust_env": True,
            }
            if self._transport is not None:
                kwargs["transport"] = self._transport
            else:
                kwargs["verify"] = self._verify
            self._client = httpx.AsyncClient(**kwargs)
        return self._client

    async def _post(
        self,
        endpoint: str,
        payload: dict[str, Any],
        allow_error_body: bool = False,
    ) -> tuple[int, dict[str, Any]]:
        """POST JSON and return (status_code, decoded body).

        With ``allow_error_body`` a 4xx reply whose body is an
        ``{"status": "error"}`` envelope is returned instead of raised.
        """
        client = self._get_client()
        try:
            response = await client.post(endpoint, json=payload)
        except httpx.TimeoutException as exc:
            raise TransportError(f"Request to {endpoint} timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Network error calling {endpoint}: {exc}") from exc

        if response.status_code == 401:
            raise AuthenticationError()

        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = None

        if response.is_success:
            if body is None:
                raise TransportError(
                    f"Invalid JSON from {endpoint}", status_code=response.status_code,
                )
            return response.status_code, body

        if (
            allow_error_body
            and body is not None
            and body.get("status") == "error"
            and 400 <= response.status_code < 500
            and response.status_code != 429
        ):
            return response.status_code, body

        message = (body or {}).get("message") or (
            f"HTTP {response.status_code}: {response.reason_phrase}"
        )
        raise TransportError(
            message,
            status_code=response.status_code,
            code=(body or {}).get("code"),
        )
