"""Project, sprint and release contracts."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import field_validator

from issuekit.core.contracts.base import PatchModel, StorageModel
from issuekit.core.contracts.issue import IssueStatus

WorkflowTable = dict[str, list[str]]
"""Mapping of a status to the statuses directly reachable from it."""

NotificationScheme = dict[str, list[str]]
"""Mapping of a notification event to recipient role names."""


class ProjectCategory(StrEnum):
    SOFTWARE = "Software"
    BUSINESS = "Business"


class ProjectType(StrEnum):
    SCRUM = "Scrum"
    KANBAN = "Kanban"


class SprintStatus(StrEnum):
    ACTIVE = "active"
    FUTURE = "future"
    COMPLETED = "completed"


class VersionStatus(StrEnum):
    RELEASED = "released"
    UNRELEASED = "unreleased"
    ARCHIVED = "archived"


class ColumnSetting(StorageModel):
    limit: int | None = None
    """Work-in-progress limit for the board column."""


class Project(StorageModel):
    id: str
    key: str
    name: str
    description: str = ""
    lead_id: str
    category: ProjectCategory = ProjectCategory.SOFTWARE
    type: ProjectType = ProjectType.KANBAN
    icon_url: str | None = None
    starred: bool = False
    column_settings: dict[IssueStatus, ColumnSetting] | None = None
    workflow_settings: WorkflowTable | None = None
    notification_settings: NotificationScheme | None = None

    @property
    def has_sprints(self) -> bool:
        """Sprint and backlog views only apply to Scrum projects."""
        return self.type == ProjectType.SCRUM


class ProjectCreate(PatchModel):
    name: str
    key: str
    id: str | None = None
    description: str | None = None
    lead_id: str | None = None
    category: ProjectCategory | None = None
    type: ProjectType | None = None
    icon_url: str | None = None
    starred: bool | None = None
    column_settings: dict[IssueStatus, ColumnSetting] | None = None
    workflow_settings: WorkflowTable | None = None
    notification_settings: NotificationScheme | None = None


class ProjectPatch(PatchModel):
    key: str | None = None
    name: str | None = None
    description: str | None = None
    lead_id: str | None = None
    category: ProjectCategory | None = None
    type: ProjectType | None = None
    icon_url: str | None = None
    starred: bool | None = None
    column_settings: dict[IssueStatus, ColumnSetting] | None = None
    workflow_settings: WorkflowTable | None = None
    notification_settings: NotificationScheme | None = None


def _coerce_legacy_sprint_status(value: Any) -> Any:
    # Older mobile installs wrote "planning" for not-yet-started sprints.
    if value == "planning":
        return SprintStatus.FUTURE
    return value


class Sprint(StorageModel):
    id: str
    project_id: str
    name: str
    status: SprintStatus = SprintStatus.FUTURE
    start_date: str | None = None
    end_date: str | None = None
    goal: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def coerce_legacy_status(cls, value: Any) -> Any:
        return _coerce_legacy_sprint_status(value)


class SprintCreate(PatchModel):
    project_id: str
    name: str | None = None
    id: str | None = None
    status: SprintStatus | None = None
    start_date: str | None = None
    end_date: str | None = None
    goal: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def coerce_legacy_status(cls, value: Any) -> Any:
        return _coerce_legacy_sprint_status(value)


class SprintPatch(PatchModel):
    name: str | None = None
    status: SprintStatus | None = None
    start_date: str | None = None
    end_date: str | None = None
    goal: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def coerce_legacy_status(cls, value: Any) -> Any:
        return _coerce_legacy_sprint_status(value)


class Version(StorageModel):
    id: str
    project_id: str
    name: str
    status: VersionStatus = VersionStatus.UNRELEASED
    release_date: str | None = None
    description: str | None = None


class VersionCreate(PatchModel):
    project_id: str
    name: str
    id: str | None = None
    status: VersionStatus | None = None
    release_date: str | None = None
    description: str | None = None


class VersionPatch(PatchModel):
    name: str | None = None
    status: VersionStatus | None = None
    release_date: str | None = None
    description: str | None = None
