# tests/unit/lookup/test_unit_retry.py - v1
"""Tests for lookup/retry.py: error classification and backoff loop."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from caseintake.core.errors import AuthenticationError, TransportError
from caseintake.lookup.retry import (
    RetryConfig,
    _compute_delay,
    classify_error,
    is_transient,
    with_retry,
)

FAST = RetryConfig(max_retries=2, base_delay_s=0.0, jitter=False)


class TestClassifyError:
    @pytest.mark.parametrize("error,expected", [
        (TransportError("x", status_code=429), "rate_limit"),
        (TransportError("x", status_code=503), "server_error"),
        (TransportError("x", status_code=404), "client_error"),
        (AuthenticationError(), "auth"),
        (TimeoutError("timed out"), "timeout"),
        (ConnectionError("connection reset"), "network"),
        (ValueError("weird"), "unknown"),
    ])
    def test_classification(self, error, expected):
        assert classify_error(error) == expected

    def test_is_transient(self):
        assert is_transient(TransportError("x", status_code=502))
        assert not is_transient(AuthenticationError())


class TestComputeDelay:
    def test_exponential_without_jitter(self):
        config = RetryConfig(max_retries=3, base_delay_s=1.0, backoff_factor=2.0, jitter=False)
        assert [_compute_delay(config, i) for i in range(3)] == [1.0, 2.0, 4.0]

    def test_jitter_bounds(self):
        config = RetryConfig(base_delay_s=2.0, jitter=True)
        for _ in range(20):
            assert 1.0 <= _compute_delay(config, 0) <= 3.0


class TestWithRetry:
    @pytest.mark.asyncio
    async def test_success_first_try(self):
        fn = AsyncMock(return_value=42)
        assert await with_retry(fn, "a", config=FAST) == 42
        fn.assert_awaited_once_with("a")

    @pytest.mark.asyncio
    async def test_retries_transient_then_succeeds(self):
        fn = AsyncMock(side_effect=[TransportError("x", status_code=503), "ok"])
        with patch("caseintake.lookup.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            assert await with_retry(fn, config=FAST) == "ok"
        assert fn.await_count == 2
        sleep.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_exhausted_reraises_transport_error(self):
        err = TransportError("down", status_code=503)
        fn = AsyncMock(side_effect=err)
        with pytest.raises(TransportError) as exc_info:
            await with_retry(fn, config=FAST)
        assert exc_info.value is err
        assert fn.await_count == 3

    @pytest.mark.asyncio
    async def test_non_transient_not_retried(self):
        fn = AsyncMock(side_effect=AuthenticationError())
        with pytest.raises(AuthenticationError):
            await with_retry(fn, config=FAST)
        assert fn.await_count == 1

    @pytest.mark.asyncio
    async def test_foreign_error_wrapped(self):
        fn = AsyncMock(side_effect=ValueError("bad payload"))
        with pytest.raises(TransportError, match="fetch-order 1 failed: bad payload") as exc_info:
            await with_retry(fn, operation="fetch-order 1", config=FAST)
        assert isinstance(exc_info.value.__cause__, ValueError)
