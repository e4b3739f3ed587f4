# src/logging/context.py - v1
"""Contextual logging support: attach run_id, identifier and step to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per batch run.
_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_identifier: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "identifier", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass(frozen=True)
class LogContext:
    """Immutable snapshot of current logging context."""

    run_id: str | None = None
    identifier: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        run_id=_run_id.get(),
        identifier=_identifier.get(),
        step=_step.get(),
    )


def set_run_context(run_id: str) -> None:
    """Set run-level context (called once per batch run)."""
    _run_id.set(run_id)
    _identifier.set(None)
    _step.set(None)


def set_identifier_context(identifier: str | None, step: str | None = None) -> None:
    """Set per-identifier context (called for each lookup step)."""
    _identifier.set(identifier)
    _step.set(step)


def clear_context() -> None:
    """Reset all context variables."""
    _run_id.set(None)
    _identifier.set(None)
    _step.set(None)
