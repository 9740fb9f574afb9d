"""SQLite row store: one table per entity, each row an id plus a JSON blob.

A few fields are copied into real columns so the common lookups can use an
index; everything else is matched with ``json_extract``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import aiosqlite

from issuekit.core.contracts.exceptions import StorageError
from issuekit.core.contracts.storage import Unsubscribe
from issuekit.storage.base import RowStore, TaskReentrantLock
from issuekit.storage.schema import ALL_TABLES, Row, Table

logger = logging.getLogger(__name__)

IN_MEMORY = ":memory:"

COLUMNS: dict[Table, tuple[tuple[str, str], ...]] = {
    Table.USERS: (("email", "TEXT"),),
    Table.PROJECTS: (),
    Table.ISSUES: (("projectId", "TEXT NOT NULL"),),
    Table.SPRINTS: (("projectId", "TEXT NOT NULL"),),
    Table.VERSIONS: (("projectId", "TEXT NOT NULL"),),
    Table.NOTIFICATIONS: (("userId", "TEXT"), ("read", "INTEGER NOT NULL DEFAULT 0")),
    Table.AUTOMATION_RULES: (("projectId", "TEXT NOT NULL"), ("enabled", "INTEGER NOT NULL DEFAULT 1")),
    Table.AUTOMATION_LOGS: (
        ("ruleId", "TEXT NOT NULL"),
        ("status", "TEXT NOT NULL"),
        ("executedAt", "TEXT NOT NULL"),
    ),
    Table.SAVED_FILTERS: (("ownerId", "TEXT NOT NULL"),),
    Table.VIEW_HISTORY: (
        ("userId", "TEXT NOT NULL"),
        ("issueId", "TEXT NOT NULL"),
        ("viewedAt", "TEXT NOT NULL"),
    ),
}
"""Denormalized columns per table, in addition to ``id`` and ``data``."""

INDEXES: dict[Table, tuple[str, ...]] = {
    Table.USERS: ("email",),
    Table.ISSUES: ("projectId",),
    Table.SPRINTS: ("projectId",),
    Table.VERSIONS: ("projectId",),
    Table.NOTIFICATIONS: ("userId",),
    Table.AUTOMATION_RULES: ("projectId",),
    Table.AUTOMATION_LOGS: ("ruleId",),
    Table.SAVED_FILTERS: ("ownerId",),
    Table.VIEW_HISTORY: ("userId", "issueId"),
}


def _column_names(table: Table) -> tuple[str, ...]:
    return tuple(name for name, _ in COLUMNS[table])


def _sql_value(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    return value


def table_sql(table: Table) -> str:
    columns = ["id TEXT PRIMARY KEY NOT NULL"]
    columns.extend(f'"{name}" {decl}' for name, decl in COLUMNS[table])
    columns.append("data TEXT NOT NULL")
    return f"CREATE TABLE IF NOT EXISTS {table} ({', '.join(columns)})"


def index_sql(table: Table) -> list[str]:
    return [f'CREATE INDEX IF NOT EXISTS {table}_{name} ON {table} ("{name}")' for name in INDEXES.get(table, ())]


class SQLiteRowStore(RowStore):
    """:class:`RowStore` over an ``aiosqlite`` connection.

    SQLite has no change feed, so :meth:`subscribe` is one-shot.

    Args:
        path: Database file, or ``None`` for a private in-memory database.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._conn: aiosqlite.Connection | None = None
        self._gate = TaskReentrantLock()

    @property
    def supports_push(self) -> bool:
        return False

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise StorageError("SQLite store is not open")
        return self._conn

    async def open(self) -> None:
        if self._conn is not None:
            return
        database = str(self.path) if self.path is not None else IN_MEMORY
        try:
            if self.path is not None:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = await aiosqlite.connect(database, timeout=10.0, isolation_level=None)
            if self.path is not None:
                await self._conn.execute("PRAGMA journal_mode = WAL")
            await self._create_schema()
        except (aiosqlite.Error, OSError) as exc:
            raise StorageError(f"failed opening SQLite database {database}: {exc}") from exc
        logger.debug("opened SQLite database %s", database)

    async def close(self) -> None:
        if self._conn is None:
            return
        try:
            await self._conn.close()
        except aiosqlite.Error as exc:
            raise StorageError(f"failed closing SQLite database: {exc}") from exc
        finally:
            self._conn = None

    async def _create_schema(self) -> None:
        for table in ALL_TABLES:
            await self._execute(table_sql(table))
        await self._add_missing_columns()
        for table in ALL_TABLES:
            for statement in index_sql(table):
                await self._execute(statement)

    async def _add_missing_columns(self) -> None:
        # Databases created by older versions may lack denormalized columns.
        for table in ALL_TABLES:
            existing = await self._table_columns(table)
            for name, decl in COLUMNS[table]:
                if name in existing:
                    continue
                column_type = decl.split()[0]
                logger.info("adding column %s.%s", table, name)
                await self._execute(f'ALTER TABLE {table} ADD COLUMN "{name}" {column_type}')
                await self._execute(f'UPDATE {table} SET "{name}" = json_extract(data, ?)', [f"$.{name}"])

    async def _table_columns(self, table: Table) -> set[str]:
        try:
            async with self.conn.execute(f"PRAGMA table_info({table})") as cursor:
                return {record[1] for record in await cursor.fetchall()}
        except aiosqlite.Error as exc:
            raise StorageError(f"SQLite query failed: {exc}") from exc

    # -- low-level helpers ------------------------------------------------

    async def _execute(self, sql: str, params: Iterable[Any] = ()) -> None:
        try:
            await self.conn.execute(sql, tuple(params))
        except aiosqlite.Error as exc:
            raise StorageError(f"SQLite statement failed: {exc}") from exc

    async def _fetch_data(self, sql: str, params: Iterable[Any] = ()) -> list[Row]:
        try:
            async with self.conn.execute(sql, tuple(params)) as cursor:
                records = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise StorageError(f"SQLite query failed: {exc}") from exc
        return [json.loads(record[0]) for record in records]

    async def _fetch_scalar(self, sql: str, params: Iterable[Any] = ()) -> Any:
        try:
            async with self.conn.execute(sql, tuple(params)) as cursor:
                record = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise StorageError(f"SQLite query failed: {exc}") from exc
        return record[0] if record is not None else None

    def _condition(self, table: Table, field: str) -> tuple[str, list[Any]]:
        if field == "id" or field in _column_names(table):
            return f'"{field}" IS ?', []
        return "json_extract(data, ?) IS ?", [f"$.{field}"]

    # -- transactions -----------------------------------------------------

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        outermost = await self._gate.acquire()
        try:
            if outermost:
                await self._execute("BEGIN IMMEDIATE")
            try:
                yield
            except BaseException:
                if outermost:
                    await self._execute("ROLLBACK")
                raise
            if outermost:
                await self._execute("COMMIT")
        finally:
            self._gate.release()

    # -- RowStore ---------------------------------------------------------

    async def get(self, table: Table, id: str) -> Row | None:
        rows = await self._fetch_data(f"SELECT data FROM {table} WHERE id = ?", [id])
        return rows[0] if rows else None

    async def all(self, table: Table) -> list[Row]:
        return await self._fetch_data(f"SELECT data FROM {table} ORDER BY rowid")

    async def where(self, table: Table, field: str, value: Any) -> list[Row]:
        condition, params = self._condition(table, field)
        return await self._fetch_data(
            f"SELECT data FROM {table} WHERE {condition} ORDER BY rowid",
            [*params, _sql_value(value)],
        )

    async def count(self, table: Table, field: str, value: Any) -> int:
        condition, params = self._condition(table, field)
        result = await self._fetch_scalar(
            f"SELECT COUNT(*) FROM {table} WHERE {condition}",
            [*params, _sql_value(value)],
        )
        return int(result or 0)

    async def put(self, table: Table, row: Row) -> None:
        columns = _column_names(table)
        names = ", ".join(["id", *(f'"{name}"' for name in columns), "data"])
        placeholders = ", ".join("?" for _ in range(len(columns) + 2))
        updates = ", ".join([*(f'"{name}" = excluded."{name}"' for name in columns), "data = excluded.data"])
        params = [row["id"], *(_sql_value(row.get(name)) for name in columns), json.dumps(row, ensure_ascii=False)]
        async with self.transaction():
            await self._execute(
                f"INSERT INTO {table} ({names}) VALUES ({placeholders}) ON CONFLICT(id) DO UPDATE SET {updates}",
                params,
            )

    async def delete(self, table: Table, ids: Iterable[str]) -> None:
        ids = list(ids)
        if not ids:
            return
        async with self.transaction():
            for id in ids:
                await self._execute(f"DELETE FROM {table} WHERE id = ?", [id])

    async def clear(self, tables: Iterable[Table]) -> None:
        async with self.transaction():
            for table in tables:
                await self._execute(f"DELETE FROM {table}")

    async def drop(self) -> None:
        async with self.transaction():
            for table in ALL_TABLES:
                await self._execute(f"DROP TABLE IF EXISTS {table}")
            for table in ALL_TABLES:
                await self._execute(table_sql(table))
                for statement in index_sql(table):
                    await self._execute(statement)
        logger.info("dropped and recreated SQLite tables")

    async def subscribe(
        self,
        table: Table,
        fetch: Callable[[], Awaitable[Any]],
        listener: Callable[[Any], None],
    ) -> Unsubscribe:
        value = await fetch()
        try:
            listener(value)
        except Exception:
            logger.exception("watch listener on %s failed", table)

        def unsubscribe() -> None:
            return None

        return unsubscribe

    # -- migrations -------------------------------------------------------

    async def migrate(self, current_user_id: str) -> None:
        """Bring rows written by older app versions up to the current layout.

        Notifications stored before they carried a recipient are assigned to
        *current_user_id*; sprint status ``"planning"`` becomes ``"future"``.
        """
        async with self.transaction():
            await self._execute(
                'UPDATE notifications SET "userId" = ?, data = json_set(data, \'$.userId\', ?) WHERE "userId" IS NULL',
                [current_user_id, current_user_id],
            )
            await self._execute(
                "UPDATE sprints SET data = json_set(data, '$.status', 'future') "
                "WHERE json_extract(data, '$.status') = 'planning'"
            )
