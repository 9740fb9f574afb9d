"""Notification contracts."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from issuekit.core.contracts.base import StorageModel


class NotificationType(StrEnum):
    MENTION = "mention"
    ASSIGNMENT = "assignment"
    SYSTEM = "system"


class NotificationEvent(StrEnum):
    ISSUE_CREATED = "issue_created"
    ISSUE_UPDATED = "issue_updated"
    ISSUE_ASSIGNED = "issue_assigned"
    STATUS_CHANGED = "status_changed"
    COMMENT_ADDED = "comment_added"
    ISSUE_RESOLVED = "issue_resolved"


class RecipientRole(StrEnum):
    REPORTER = "Reporter"
    ASSIGNEE = "Assignee"
    WATCHER = "Watcher"


class Notification(StorageModel):
    id: str
    title: str
    description: str = ""
    read: bool = False
    created_at: str
    type: NotificationType = NotificationType.SYSTEM
    issue_id: str | None = None
    recipient_id: str | None = Field(default=None, alias="userId")
