"""Logical table layout shared by both adapters.

Index names are the persisted (camelCase) field names. The web store
declares them as secondary indexes; the mobile store mirrors the ones it
queries most as denormalized columns and falls back to ``json_extract`` for
the rest.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from issuekit.core.contracts.automation import AutomationLog, AutomationRule
from issuekit.core.contracts.base import StorageModel
from issuekit.core.contracts.filter import SavedFilter, ViewHistory
from issuekit.core.contracts.issue import Issue
from issuekit.core.contracts.notification import Notification
from issuekit.core.contracts.project import Project, Sprint, Version
from issuekit.core.contracts.user import User

Row = dict[str, Any]
"""One persisted entity, keyed by camelCase field names."""


class Table(StrEnum):
    USERS = "users"
    PROJECTS = "projects"
    ISSUES = "issues"
    SPRINTS = "sprints"
    VERSIONS = "versions"
    NOTIFICATIONS = "notifications"
    AUTOMATION_RULES = "automation_rules"
    AUTOMATION_LOGS = "automation_logs"
    SAVED_FILTERS = "saved_filters"
    VIEW_HISTORY = "view_history"


@dataclass(frozen=True)
class TableSchema:
    table: Table
    model: type[StorageModel]
    indexes: tuple[str, ...] = ()
    unique: tuple[str, ...] = ()
    compound: tuple[tuple[str, ...], ...] = ()


SCHEMA_VERSION = 9

TABLES: dict[Table, TableSchema] = {
    schema.table: schema
    for schema in (
        TableSchema(Table.USERS, User, unique=("email",)),
        TableSchema(Table.PROJECTS, Project, indexes=("key", "type", "leadId")),
        TableSchema(
            Table.ISSUES,
            Issue,
            indexes=("key", "projectId", "sprintId", "assigneeId", "reporterId", "parentId", "status", "type"),
        ),
        TableSchema(Table.SPRINTS, Sprint, indexes=("projectId", "status")),
        TableSchema(Table.VERSIONS, Version, indexes=("projectId",)),
        TableSchema(Table.NOTIFICATIONS, Notification, indexes=("read", "createdAt")),
        TableSchema(Table.AUTOMATION_RULES, AutomationRule, indexes=("projectId", "trigger", "enabled")),
        TableSchema(Table.AUTOMATION_LOGS, AutomationLog, indexes=("ruleId", "executedAt")),
        TableSchema(Table.SAVED_FILTERS, SavedFilter),
        TableSchema(
            Table.VIEW_HISTORY,
            ViewHistory,
            indexes=("userId", "viewedAt"),
            compound=(("userId", "issueId"),),
        ),
    )
}

ALL_TABLES: tuple[Table, ...] = tuple(TABLES)

PROJECT_OWNED_TABLES: tuple[Table, ...] = (Table.ISSUES, Table.SPRINTS, Table.VERSIONS, Table.AUTOMATION_RULES)
"""Tables whose rows carry a ``projectId`` and go away with their project."""
