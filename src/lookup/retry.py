# src/lookup/retry.py - v1
"""Retry policy with exponential backoff for transient transport failures."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from caseintake.core.errors import AuthenticationError, TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryConfig:
    """Retry configuration for lookup calls."""

    max_retries: int = 2
    base_delay_s: float = 1.0
    backoff_factor: float = 2.0
    jitter: bool = True


_TRANSIENT_TYPES = frozenset({"rate_limit", "timeout", "server_error", "network"})


def classify_error(error: Exception) -> str:
    """Classify an exception into a retry error type."""
    if isinstance(error, AuthenticationError):
        return "auth"

    status = getattr(error, "status_code", None)
    if status == 429:
        return "rate_limit"
    if status is not None and 500 <= status < 600:
        return "server_error"
    if status is not None:
        return "client_error"

    msg = str(error).lower()
    name = type(error).__name__.lower()
    if "timeout" in name or "timed out" in msg or "timeout" in msg:
        return "timeout"
    if "connect" in name or "connection" in msg or "network" in msg:
        return "network"
    return "unknown"


def is_transient(error: Exception) -> bool:
    return classify_error(error) in _TRANSIENT_TYPES


def _compute_delay(config: RetryConfig, attempt: int) -> float:
    """Compute delay for a given attempt (0-based)."""
    delay = config.base_delay_s * (config.backoff_factor ** attempt)
    if config.jitter:
        delay *= 0.5 + random.random()  # noqa: S311
    return delay


async def with_retry(
    fn: Callable[..., Awaitable[Any]],
    *args: Any,
    operation: str = "lookup",
    config: RetryConfig | None = None,
    **kwargs: Any,
) -> Any:
    """Execute an async lookup with retry on transient failures.

    Non-transient errors are re-raised on the first attempt. When retries
    run out the last error is re-raised as-is if it already is a
    TransportError, otherwise wrapped in one.
    """
    config = config or RetryConfig()
    attempts = 0

    while True:
        try:
            return await fn(*args, **kwargs)
        except Exception as e:
            attempts += 1
            error_type = classify_error(e)
            if error_type not in _TRANSIENT_TYPES or attempts > config.max_retries:
                if isinstance(e, TransportError):
                    raise
                raise TransportError(f"{operation} failed: {e}") from e

            delay = _compute_delay(config, attempts - 1)
            logger.warning(
                "%s - %s (attempt %d/%d), retrying in %.1fs",
                operation, error_type, attempts, config.max_retries, delay,
            )
            await asyncio.sleep(delay)
