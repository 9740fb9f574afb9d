"""Issue contracts."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import Field

from issuekit.core.contracts.base import PatchModel, StorageModel


class IssueType(StrEnum):
    STORY = "Story"
    BUG = "Bug"
    TASK = "Task"
    EPIC = "Epic"


class IssueStatus(StrEnum):
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    IN_REVIEW = "In Review"
    DONE = "Done"


class IssuePriority(StrEnum):
    HIGHEST = "Highest"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    LOWEST = "Lowest"


class LinkType(StrEnum):
    BLOCKS = "blocks"
    IS_BLOCKED_BY = "is blocked by"
    DUPLICATES = "duplicates"
    RELATES_TO = "relates to"


class Comment(StorageModel):
    id: str
    author_id: str
    content: str
    created_at: str


class WorkLog(StorageModel):
    id: str
    author_id: str
    time_spent_seconds: int
    comment: str | None = None
    created_at: str


class Attachment(StorageModel):
    id: str
    file_name: str
    file_type: str
    file_size: int
    data: str
    """Full file contents as a ``data:`` URI."""
    created_at: str


class IssueLink(StorageModel):
    id: str
    type: LinkType
    outward_issue_id: str


class HistoryEntry(StorageModel):
    """One audit record; ``field`` uses the persisted (camelCase) field name."""

    id: str
    author_id: str
    field: str
    from_: Any = Field(default=None, alias="from")
    to: Any = None
    created_at: str


class Issue(StorageModel):
    id: str
    key: str
    project_id: str
    title: str
    type: IssueType = IssueType.TASK
    status: IssueStatus = IssueStatus.TODO
    priority: IssuePriority = IssuePriority.MEDIUM
    assignee_id: str | None = None
    reporter_id: str
    sprint_id: str | None = None
    fix_version_id: str | None = None
    description: str | None = None
    due_date: str | None = None
    story_points: float | None = None
    labels: list[str] = Field(default_factory=list)
    comments: list[Comment] = Field(default_factory=list)
    work_logs: list[WorkLog] = Field(default_factory=list)
    history: list[HistoryEntry] = Field(default_factory=list)
    links: list[IssueLink] = Field(default_factory=list)
    attachments: list[Attachment] = Field(default_factory=list)
    watcher_ids: list[str] = Field(default_factory=list)
    parent_id: str | None = None
    created_at: str
    updated_at: str


class IssueCreate(PatchModel):
    """Input for ``issues.create``; unset fields take adapter defaults."""

    project_id: str
    title: str
    id: str | None = None
    type: IssueType | None = None
    status: IssueStatus | None = None
    priority: IssuePriority | None = None
    assignee_id: str | None = None
    reporter_id: str | None = None
    sprint_id: str | None = None
    fix_version_id: str | None = None
    description: str | None = None
    due_date: str | None = None
    story_points: float | None = None
    labels: list[str] | None = None
    parent_id: str | None = None
    watcher_ids: list[str] | None = None


class IssuePatch(PatchModel):
    title: str | None = None
    type: IssueType | None = None
    status: IssueStatus | None = None
    priority: IssuePriority | None = None
    assignee_id: str | None = None
    sprint_id: str | None = None
    fix_version_id: str | None = None
    description: str | None = None
    due_date: str | None = None
    story_points: float | None = None
    labels: list[str] | None = None
    parent_id: str | None = None
    watcher_ids: list[str] | None = None
