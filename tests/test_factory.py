from __future__ import annotations

import pytest

from issuekit.core.contracts.config import StorageConfig
from issuekit.core.contracts.exceptions import ConfigError
from issuekit.storage import SQLiteStorageAdapter, WebStorageAdapter, create_storage


def test_create_storage_selects_backend() -> None:
    assert isinstance(create_storage(StorageConfig(backend="web")), WebStorageAdapter)
    assert isinstance(create_storage(StorageConfig(backend="mobile")), SQLiteStorageAdapter)


def test_create_storage_passes_permissions() -> None:
    def deny(user_id: str, action: str, project: object = None) -> bool:
        return False

    storage = create_storage(StorageConfig(), permissions=deny)

    assert storage.has_permission("u1", "delete_issue") is False


def test_create_storage_rejects_unknown_backend() -> None:
    config = StorageConfig.model_construct(backend="cloud")

    with pytest.raises(ConfigError, match="Unknown storage backend"):
        create_storage(config)
