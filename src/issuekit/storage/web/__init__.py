"""Web storage adapter."""

from issuekit.storage.web.adapter import LocalDatabaseRowStore, WebStorageAdapter, store_declarations
from issuekit.storage.web.db import ConstraintError, LocalDatabase
from issuekit.storage.web.settings import JsonSettingsStore

__all__ = [
    "ConstraintError",
    "JsonSettingsStore",
    "LocalDatabase",
    "LocalDatabaseRowStore",
    "WebStorageAdapter",
    "store_declarations",
]
