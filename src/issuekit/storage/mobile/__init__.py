"""Mobile (SQLite) storage adapter."""

from issuekit.storage.mobile.adapter import SQLiteStorageAdapter
from issuekit.storage.mobile.db import SQLiteRowStore
from issuekit.storage.mobile.settings import SQLiteSettingsStore

__all__ = ["SQLiteRowStore", "SQLiteSettingsStore", "SQLiteStorageAdapter"]
