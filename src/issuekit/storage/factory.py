"""Factory for creating storage adapters.

Decouples adapter selection from adapter implementation. The CLI and
applications pick a backend by name from configuration.
"""

from __future__ import annotations

from issuekit.core.contracts.config import StorageConfig
from issuekit.core.contracts.exceptions import ConfigError
from issuekit.core.domain.permissions import PermissionCheck, has_permission
from issuekit.storage.base import StorageAdapter
from issuekit.storage.mobile import SQLiteStorageAdapter
from issuekit.storage.web import WebStorageAdapter

# Registry mapping backend names to their adapter classes
_REGISTRY: dict[str, type[StorageAdapter]] = {
    "web": WebStorageAdapter,
    "mobile": SQLiteStorageAdapter,
}


def create_storage(config: StorageConfig, *, permissions: PermissionCheck = has_permission) -> StorageAdapter:
    """Create an adapter for ``config.backend``.

    The returned adapter is an async context manager::

        async with create_storage(config) as storage:
            issues = await storage.issues.search("status = Done")

    Raises:
        ConfigError: If the backend name is not registered.
    """
    if config.backend not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY)) or "(none registered)"
        raise ConfigError(f"Unknown storage backend: {config.backend!r}. Available: {available}")
    return _REGISTRY[config.backend](config, permissions=permissions)
