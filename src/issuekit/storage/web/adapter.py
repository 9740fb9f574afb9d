"""Web adapter: :class:`LocalDatabase` tables with push live queries."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from contextlib import AbstractAsyncContextManager
from typing import Any

from issuekit.core.contracts.config import StorageConfig
from issuekit.core.contracts.storage import Unsubscribe
from issuekit.core.domain.permissions import PermissionCheck, has_permission
from issuekit.storage.base import RowStore, StorageAdapter
from issuekit.storage.schema import SCHEMA_VERSION, TABLES, Row, Table
from issuekit.storage.web.db import LocalDatabase
from issuekit.storage.web.settings import JsonSettingsStore

DATABASE_NAME = "JiraCloneDB"

TABLE_NAMES: dict[Table, str] = {
    Table.USERS: "users",
    Table.PROJECTS: "projects",
    Table.ISSUES: "issues",
    Table.SPRINTS: "sprints",
    Table.VERSIONS: "projectVersions",
    Table.NOTIFICATIONS: "notifications",
    Table.AUTOMATION_RULES: "automationRules",
    Table.AUTOMATION_LOGS: "automationLogs",
    Table.SAVED_FILTERS: "savedFilters",
    Table.VIEW_HISTORY: "viewHistory",
}
"""Logical table to the store's table name."""


def store_declarations() -> dict[str, str]:
    """Schema strings for every table, e.g. ``{"users": "id, &email", ...}``."""
    declarations: dict[str, str] = {}
    for table, schema in TABLES.items():
        parts = ["id"]
        parts.extend(f"&{name}" for name in schema.unique)
        parts.extend(schema.indexes)
        parts.extend(f"[{'+'.join(fields)}]" for fields in schema.compound)
        declarations[TABLE_NAMES[table]] = ", ".join(parts)
    return declarations


class LocalDatabaseRowStore(RowStore):
    """:class:`RowStore` over a :class:`LocalDatabase`."""

    def __init__(self, db: LocalDatabase) -> None:
        self.db = db

    @property
    def supports_push(self) -> bool:
        return True

    @property
    def is_open(self) -> bool:
        return self.db.is_open()

    async def open(self) -> None:
        await self.db.open()

    async def close(self) -> None:
        self.db.close()

    async def get(self, table: Table, id: str) -> Row | None:
        return self.db.get(TABLE_NAMES[table], id)

    async def all(self, table: Table) -> list[Row]:
        return self.db.to_array(TABLE_NAMES[table])

    async def where(self, table: Table, field: str, value: Any) -> list[Row]:
        return self.db.where(TABLE_NAMES[table], **{field: value})

    async def count(self, table: Table, field: str, value: Any) -> int:
        return self.db.count(TABLE_NAMES[table], **{field: value})

    async def put(self, table: Table, row: Row) -> None:
        await self.db.put(TABLE_NAMES[table], row)

    async def put_many(self, table: Table, rows: Iterable[Row]) -> None:
        await self.db.bulk_put(TABLE_NAMES[table], rows)

    async def delete(self, table: Table, ids: Iterable[str]) -> None:
        await self.db.bulk_delete(TABLE_NAMES[table], ids)

    async def clear(self, tables: Iterable[Table]) -> None:
        names = [TABLE_NAMES[table] for table in tables]
        if names:
            await self.db.clear(*names)

    def transaction(self) -> AbstractAsyncContextManager[None]:
        return self.db.transaction()

    async def drop(self) -> None:
        await self.db.delete()
        await self.db.open()
        await self.db.requery()

    async def subscribe(
        self,
        table: Table,
        fetch: Callable[[], Awaitable[Any]],
        listener: Callable[[Any], None],
    ) -> Unsubscribe:
        return await self.db.live_query([TABLE_NAMES[table]], fetch, listener)


class WebStorageAdapter(StorageAdapter):
    """Storage for the web app.

    Watches are push subscriptions: listeners fire immediately and again
    after every committed change to the watched table.

    Example::

        async with WebStorageAdapter(StorageConfig(path=Path("db.json"))) as storage:
            await storage.seed_demo()
    """

    backend_name = "web"

    def __init__(
        self,
        config: StorageConfig | None = None,
        *,
        permissions: PermissionCheck = has_permission,
    ) -> None:
        config = config or StorageConfig(backend="web")
        self.db = LocalDatabase(DATABASE_NAME, SCHEMA_VERSION, store_declarations(), path=config.path)
        super().__init__(
            LocalDatabaseRowStore(self.db),
            JsonSettingsStore(config.settings_path),
            config,
            permissions=permissions,
        )
