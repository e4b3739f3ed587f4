# src/config/settings.py - v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for deployment-specific settings: which lookup
backend to talk to, HTTP transport tuning, retry policy, default batch
mode and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Lookup backend ===
    lookup_backend: Literal["http", "memory"] = "http"
    lookup_fixtures_path: Path | None = None

    # === HTTP transport ===
    api_base_url: str = "http://localhost:5000/api"
    api_auth_token: str = ""
    http_timeout_seconds: float = 30.0
    http_verify_ssl: bool = True
    http_user_agent: str = ""

    # === Retry ===
    lookup_max_retries: int = 2
    lookup_retry_base_delay_s: float = 1.0
    lookup_retry_backoff_factor: float = 2.0

    # === Batch ===
    batch_mode: Literal["receive", "status_update"] = "receive"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("http_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:  # noqa: N805
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("lookup_max_retries")
    @classmethod
    def validate_retries(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("lookup_max_retries must be >= 0")
        return v

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:  # noqa: N805
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.lookup_backend == "memory" and self.lookup_fixtures_path is None:
            errors.append("LOOKUP_BACKEND=memory requires LOOKUP_FIXTURES_PATH")

        if self.lookup_backend == "http" and not self.api_base_url.startswith(
            ("http://", "https://")
        ):
            errors.append("API_BASE_URL must be an http(s) URL")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or CLI flags).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
