"""Mobile adapter: SQLite tables with one-shot watches."""

from __future__ import annotations

from issuekit.core.contracts.config import StorageConfig
from issuekit.core.domain.permissions import PermissionCheck, has_permission
from issuekit.storage.base import StorageAdapter
from issuekit.storage.mobile.db import SQLiteRowStore
from issuekit.storage.mobile.settings import SQLiteSettingsStore


class SQLiteStorageAdapter(StorageAdapter):
    """Storage for the mobile app.

    Watches fetch once, call the listener once and return a no-op
    unsubscribe. Callers re-fetch after each mutation.

    Settings live in a ``settings`` table of the same database file unless
    ``settings_path`` names another one.
    """

    backend_name = "mobile"

    def __init__(
        self,
        config: StorageConfig | None = None,
        *,
        permissions: PermissionCheck = has_permission,
    ) -> None:
        config = config or StorageConfig(backend="mobile")
        self.db = SQLiteRowStore(config.path)
        settings = SQLiteSettingsStore(config.settings_path or config.path)
        super().__init__(self.db, settings, config, permissions=permissions)

    async def open(self) -> None:
        await super().open()
        await self.db.migrate(self.current_user_id)
