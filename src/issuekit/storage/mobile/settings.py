"""Settings store kept in its own SQLite key-value table."""

from __future__ import annotations

import logging
from pathlib import Path

import aiosqlite

from issuekit.core.contracts.exceptions import StorageError
from issuekit.core.contracts.storage import SettingsStore

logger = logging.getLogger(__name__)


class SQLiteSettingsStore(SettingsStore):
    """String key-value settings in a ``settings`` table.

    Args:
        path: Database file, or ``None`` for a private in-memory database.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._conn: aiosqlite.Connection | None = None

    async def open(self) -> None:
        if self._conn is not None:
            return
        database = str(self.path) if self.path is not None else ":memory:"
        try:
            if self.path is not None:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = await aiosqlite.connect(database, timeout=10.0)
            await self._conn.execute(
                "CREATE TABLE IF NOT EXISTS settings (key TEXT PRIMARY KEY NOT NULL, value TEXT NOT NULL)"
            )
            await self._conn.commit()
        except (aiosqlite.Error, OSError) as exc:
            raise StorageError(f"failed opening settings database {database}: {exc}") from exc

    async def close(self) -> None:
        if self._conn is None:
            return
        try:
            await self._conn.close()
        except aiosqlite.Error as exc:
            raise StorageError(f"failed closing settings database: {exc}") from exc
        finally:
            self._conn = None

    @property
    def _db(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise StorageError("settings store is not open")
        return self._conn

    async def get(self, key: str) -> str | None:
        try:
            async with self._db.execute("SELECT value FROM settings WHERE key = ?", (key,)) as cursor:
                record = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise StorageError(f"failed reading setting {key!r}: {exc}") from exc
        return record[0] if record is not None else None

    async def set(self, key: str, value: str) -> None:
        await self._write(
            "INSERT INTO settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            [(key, value)],
        )

    async def remove(self, key: str) -> None:
        await self._write("DELETE FROM settings WHERE key = ?", [(key,)])

    async def keys(self, prefix: str | None = None) -> list[str]:
        try:
            async with self._db.execute("SELECT key FROM settings ORDER BY rowid") as cursor:
                records = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise StorageError(f"failed listing settings: {exc}") from exc
        names = [record[0] for record in records]
        if not prefix:
            return names
        return [name for name in names if name.startswith(prefix)]

    async def multi_remove(self, keys: list[str]) -> None:
        if not keys:
            return
        await self._write("DELETE FROM settings WHERE key = ?", [(key,) for key in keys])

    async def _write(self, sql: str, rows: list[tuple[str, ...]]) -> None:
        try:
            await self._db.executemany(sql, rows)
            await self._db.commit()
        except aiosqlite.Error as exc:
            raise StorageError(f"failed writing settings: {exc}") from exc
