"""Storage adapters implementing :class:`~issuekit.core.contracts.storage.AppStorage`."""

from issuekit.storage.base import RowStore, StorageAdapter
from issuekit.storage.factory import create_storage
from issuekit.storage.mobile import SQLiteStorageAdapter
from issuekit.storage.schema import Table
from issuekit.storage.web import WebStorageAdapter

__all__ = [
    "RowStore",
    "SQLiteStorageAdapter",
    "StorageAdapter",
    "Table",
    "WebStorageAdapter",
    "create_storage",
]
