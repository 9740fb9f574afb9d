"""Multi-table local database with secondary indexes and live queries.

Mirrors the browser store the web app persists to: each table is keyed by
``id`` and declares its secondary indexes in a compact schema string
(``"id, key, projectId"``; ``&field`` for unique, ``[a+b]`` for compound).
Writes run inside serialized transactions that roll back on error, and every
committed change re-runs the live queries observing the touched tables.

When given a path, the whole database is saved as one JSON document after
each committed write.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from issuekit.core.contracts.exceptions import StorageError
from issuekit.core.contracts.storage import Unsubscribe
from issuekit.storage.base import TaskReentrantLock
from issuekit.storage.schema import Row

logger = logging.getLogger(__name__)

IndexKey = tuple[Any, ...]


class ConstraintError(StorageError):
    """Raised when a write violates a unique index."""


@dataclass
class TableSpec:
    name: str
    indexes: tuple[tuple[str, ...], ...] = ()
    unique: frozenset[tuple[str, ...]] = frozenset()

    @classmethod
    def parse(cls, name: str, declaration: str) -> TableSpec:
        """Parse ``"id, &email, [userId+issueId]"``; the first entry must be ``id``."""
        parts = [part.strip() for part in declaration.split(",") if part.strip()]
        if not parts or parts[0] != "id":
            raise ValueError(f"table {name!r} must declare 'id' as its primary key")
        indexes: list[tuple[str, ...]] = []
        unique: set[tuple[str, ...]] = set()
        for part in parts[1:]:
            is_unique = part.startswith("&")
            part = part.lstrip("&")
            if part.startswith("[") and part.endswith("]"):
                index = tuple(piece.strip() for piece in part[1:-1].split("+"))
            else:
                index = (part,)
            indexes.append(index)
            if is_unique:
                unique.add(index)
        return cls(name=name, indexes=tuple(indexes), unique=frozenset(unique))


def _index_value(value: Any) -> Any:
    # Lists and dicts are not indexable; they are matched by a scan instead.
    if isinstance(value, list | dict):
        return None
    return value


def _index_key(row: Row, index: tuple[str, ...]) -> IndexKey | None:
    values = tuple(_index_value(row.get(name)) for name in index)
    if any(value is None for value in values):
        return None
    return values


@dataclass
class _Table:
    spec: TableSpec
    rows: dict[str, Row] = field(default_factory=dict)
    index_data: dict[tuple[str, ...], dict[IndexKey, set[str]]] = field(default_factory=dict)

    def reindex(self) -> None:
        self.index_data = {index: {} for index in self.spec.indexes}
        for row in self.rows.values():
            self._add_to_indexes(row)

    def _add_to_indexes(self, row: Row) -> None:
        for index, entries in self.index_data.items():
            key = _index_key(row, index)
            if key is not None:
                entries.setdefault(key, set()).add(row["id"])

    def _drop_from_indexes(self, row: Row) -> None:
        for index, entries in self.index_data.items():
            key = _index_key(row, index)
            if key is None:
                continue
            ids = entries.get(key)
            if ids is not None:
                ids.discard(row["id"])
                if not ids:
                    del entries[key]

    def check_unique(self, row: Row) -> None:
        for index in self.spec.unique:
            key = _index_key(row, index)
            if key is None:
                continue
            holders = self.index_data.get(index, {}).get(key, set()) - {row["id"]}
            if holders:
                raise ConstraintError(f"unique index {'+'.join(index)} violated in {self.spec.name}: {key}")

    def put(self, row: Row) -> None:
        self.check_unique(row)
        previous = self.rows.get(row["id"])
        if previous is not None:
            self._drop_from_indexes(previous)
        self.rows[row["id"]] = row
        self._add_to_indexes(row)

    def delete(self, id: str) -> bool:
        row = self.rows.pop(id, None)
        if row is None:
            return False
        self._drop_from_indexes(row)
        return True

    def clear(self) -> None:
        self.rows.clear()
        self.reindex()

    def lookup(self, index: tuple[str, ...], key: IndexKey) -> list[Row]:
        ids = self.index_data.get(index, {}).get(key, set())
        # Preserve insertion order.
        return [row for row_id, row in self.rows.items() if row_id in ids]


@dataclass
class _Observer:
    tables: frozenset[str]
    fetch: Callable[[], Awaitable[Any]]
    listener: Callable[[Any], None]
    active: bool = True


class LocalDatabase:
    """In-process multi-table store.

    Args:
        name: Database name, used in log messages.
        version: Schema version written to the persisted file.
        stores: Table name to schema declaration.
        path: JSON file to load from and save to. ``None`` keeps data in memory.
    """

    def __init__(self, name: str, version: int, stores: dict[str, str], *, path: Path | None = None) -> None:
        self.name = name
        self.version = version
        self.path = path
        self._specs = {table: TableSpec.parse(table, declaration) for table, declaration in stores.items()}
        self._tables: dict[str, _Table] = {}
        self._gate = TaskReentrantLock()
        self._snapshot: dict[str, dict[str, Row]] | None = None
        self._observers: list[_Observer] = []
        self._open = False
        self._reset_tables()

    @property
    def table_names(self) -> tuple[str, ...]:
        return tuple(self._specs)

    def is_open(self) -> bool:
        return self._open

    def _reset_tables(self) -> None:
        self._tables = {name: _Table(spec) for name, spec in self._specs.items()}
        for table in self._tables.values():
            table.reindex()

    def _table(self, name: str) -> _Table:
        try:
            return self._tables[name]
        except KeyError:
            raise StorageError(f"unknown table {name!r} in database {self.name}") from None

    # -- lifecycle --------------------------------------------------------

    async def open(self) -> None:
        if self._open:
            return
        if self.path is not None and self.path.exists():
            payload = await self._read_file(self.path)
            stored_version = payload.get("version", 0)
            if stored_version > self.version:
                raise StorageError(f"database {self.name} has version {stored_version}, newer than {self.version}")
            for name, rows in payload.get("tables", {}).items():
                if name not in self._specs:
                    logger.debug("ignoring unknown table %s in %s", name, self.path)
                    continue
                table = self._tables[name]
                table.rows = {row["id"]: row for row in rows}
                table.reindex()
        self._open = True
        logger.debug("opened local database %s (version %d)", self.name, self.version)

    def close(self) -> None:
        self._open = False
        self._observers.clear()

    async def delete(self) -> None:
        """Close the database, discard all data and remove its file.

        Live queries stay registered; they see the empty tables once the
        database is reopened and :meth:`requery` runs.
        """
        self._open = False
        self._reset_tables()
        if self.path is not None:
            try:
                await asyncio.to_thread(self.path.unlink, missing_ok=True)
            except OSError as exc:
                raise StorageError(f"failed deleting database file: {self.path}") from exc
        logger.info("deleted local database %s", self.name)

    @staticmethod
    async def _read_file(path: Path) -> dict[str, Any]:
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
            payload = json.loads(text)
        except OSError as exc:
            raise StorageError(f"failed reading database file: {path}") from exc
        except json.JSONDecodeError as exc:
            raise StorageError(f"corrupt database file: {path}") from exc
        if not isinstance(payload, dict):
            raise StorageError(f"corrupt database file: {path}")
        return payload

    async def _save(self) -> None:
        if self.path is None:
            return
        payload = {
            "version": self.version,
            "tables": {name: list(table.rows.values()) for name, table in self._tables.items()},
        }
        text = json.dumps(payload, ensure_ascii=False)
        try:
            await asyncio.to_thread(self._write_file, self.path, text)
        except OSError as exc:
            raise StorageError(f"failed writing database file: {self.path}") from exc

    @staticmethod
    def _write_file(path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(text, encoding="utf-8")
        tmp.replace(path)

    def _require_open(self) -> None:
        if not self._open:
            raise StorageError(f"database {self.name} is closed")

    # -- transactions -----------------------------------------------------

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Serialized read-write scope over every table.

        Changes are rolled back if the block raises. Live queries re-run once
        the outermost scope commits.
        """
        outermost = await self._gate.acquire()
        touched: set[str] = set()
        try:
            if outermost:
                self._snapshot = {}
            try:
                yield
                if outermost and self._snapshot:
                    await self._save()
            except BaseException:
                if outermost:
                    self._rollback()
                raise
            if outermost:
                touched = set(self._snapshot or ())
                self._snapshot = None
        finally:
            self._gate.release()
        if touched:
            await self._notify(touched)

    def _touch(self, name: str) -> _Table:
        """Return table *name* for writing, remembering its rows for rollback."""
        self._require_open()
        table = self._table(name)
        if self._snapshot is not None and name not in self._snapshot:
            # Stored rows are never mutated in place, so a shallow copy is enough.
            self._snapshot[name] = dict(table.rows)
        return table

    def _rollback(self) -> None:
        snapshot = self._snapshot or {}
        for name, rows in snapshot.items():
            table = self._tables[name]
            table.rows = rows
            table.reindex()
        logger.debug("rolled back transaction on %s (%s)", self.name, ", ".join(sorted(snapshot)) or "no changes")
        self._snapshot = None

    # -- reads ------------------------------------------------------------

    def get(self, table: str, id: str) -> Row | None:
        self._require_open()
        row = self._table(table).rows.get(id)
        return copy.deepcopy(row) if row is not None else None

    def to_array(self, table: str) -> list[Row]:
        self._require_open()
        return copy.deepcopy(list(self._table(table).rows.values()))

    def where(self, table: str, **equals: Any) -> list[Row]:
        """Rows matching every ``field=value`` pair, served from an index when one covers the fields."""
        self._require_open()
        store = self._table(table)
        fields = tuple(equals)
        index = next((candidate for candidate in store.spec.indexes if set(candidate) == set(fields)), None)
        key = tuple(_index_value(equals[name]) for name in index) if index is not None else None
        if index is not None and key is not None and None not in key:
            rows = store.lookup(index, key)
        else:
            rows = [
                row
                for row in store.rows.values()
                if all(row.get(name) == value for name, value in equals.items())
            ]
        return copy.deepcopy(rows)

    def count(self, table: str, **equals: Any) -> int:
        self._require_open()
        if not equals:
            return len(self._table(table).rows)
        return len(self.where(table, **equals))

    # -- writes -----------------------------------------------------------

    async def put(self, table: str, row: Row) -> None:
        async with self.transaction():
            self._touch(table).put(copy.deepcopy(row))

    async def bulk_put(self, table: str, rows: Iterable[Row]) -> None:
        async with self.transaction():
            store = self._touch(table)
            for row in rows:
                store.put(copy.deepcopy(row))

    async def bulk_delete(self, table: str, ids: Iterable[str]) -> None:
        ids = [id for id in ids if id in self._table(table).rows]
        if not ids:
            return
        async with self.transaction():
            store = self._touch(table)
            for id in ids:
                store.delete(id)

    async def clear(self, *tables: str) -> None:
        async with self.transaction():
            for name in tables or self.table_names:
                self._touch(name).clear()

    # -- live queries -----------------------------------------------------

    async def live_query(
        self,
        tables: Iterable[str],
        fetch: Callable[[], Awaitable[Any]],
        listener: Callable[[Any], None],
    ) -> Unsubscribe:
        """Emit ``await fetch()`` to *listener* now and after every commit touching *tables*."""
        observer = _Observer(tables=frozenset(tables), fetch=fetch, listener=listener)
        self._observers.append(observer)
        await self._emit(observer)

        def unsubscribe() -> None:
            observer.active = False
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    async def requery(self) -> None:
        """Re-emit every live query, e.g. after the database was recreated."""
        await self._notify(set(self.table_names))

    async def _notify(self, touched: set[str]) -> None:
        for observer in list(self._observers):
            if observer.active and observer.tables & touched:
                await self._emit(observer)

    async def _emit(self, observer: _Observer) -> None:
        try:
            value = await observer.fetch()
            if observer.active:
                observer.listener(value)
        except Exception:
            logger.exception("live query listener on %s failed", ", ".join(sorted(observer.tables)))
