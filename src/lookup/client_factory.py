# src/lookup/client_factory.py - v1
"""Factory: instantiate a lookup client from a backend name."""

from __future__ import annotations

import importlib
import logging

from caseintake.config.settings import Settings
from caseintake.lookup.base_client import BaseLookupClient
from caseintake.lookup.retry import RetryConfig

logger = logging.getLogger(__name__)

# Registry of backend name → adapter class path (lazy import).
_BACKEND_REGISTRY: dict[str, str] = {
    "http": "caseintake.lookup.http_client.HttpLookupClient",
    "memory": "caseintake.lookup.memory_client.InMemoryLookupClient",
}


class UnsupportedBackendError(ValueError):
    """Raised when a backend is not registered."""


def create_lookup_client(
    backend: str,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseLookupClient:
    """Instantiate the correct adapter from backend name.

    Args:
        backend: Backend identifier (http, memory).
        settings: Application settings (URL, token, retry policy, fixtures).
        **kwargs: Additional adapter-specific arguments; win over settings.

    Returns:
        Configured BaseLookupClient instance.

    Raises:
        UnsupportedBackendError: If backend is not registered.
    """
    if backend not in _BACKEND_REGISTRY:
        raise UnsupportedBackendError(
            f"Unsupported lookup backend: {backend!r}. "
            f"Available: {', '.join(sorted(_BACKEND_REGISTRY))}"
        )

    adapter_cls = _import_class(_BACKEND_REGISTRY[backend])
    init_kwargs = dict(kwargs)

    if settings is not None:
        if backend == "http":
            init_kwargs.setdefault("base_url", settings.api_base_url)
            init_kwargs.setdefault("auth_token", settings.api_auth_token)
            init_kwargs.setdefault("timeout_seconds", settings.http_timeout_seconds)
            init_kwargs.setdefault("verify_ssl", settings.http_verify_ssl)
            init_kwargs.setdefault("user_agent", settings.http_user_agent)
            init_kwargs.setdefault(
                "retry_config",
                RetryConfig(
                    max_retries=settings.lookup_max_retries,
                    base_delay_s=settings.lookup_retry_base_delay_s,
                    backoff_factor=settings.lookup_retry_backoff_factor,
                ),
            )
        elif (
            backend == "memory"
            and settings.lookup_fixtures_path is not None
            and not init_kwargs
        ):
            logger.debug(
                "Creating lookup client: backend=memory, fixtures=%s",
                settings.lookup_fixtures_path,
            )
            return adapter_cls.from_file(settings.lookup_fixtures_path)

    logger.debug("Creating lookup client: backend=%s", backend)
    return adapter_cls(**init_kwargs)


def register_backend(name: str, class_path: str) -> None:
    """Register a custom lookup adapter.

    Args:
        name: Backend identifier.
        class_path: Fully qualified class path implementing BaseLookupClient.
    """
    _BACKEND_REGISTRY[name] = class_path
    logger.info("Registered lookup backend: %s -> %s", name, class_path)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
