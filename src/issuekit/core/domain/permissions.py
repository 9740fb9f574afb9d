"""Placeholder permission model until roles are modelled."""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum

from issuekit.core.contracts.project import Project


class Permission(StrEnum):
    MANAGE_PROJECT = "manage_project"
    DELETE_ISSUE = "delete_issue"


ADMIN_USER_IDS = frozenset({"u1"})
PROJECT_MANAGER_USER_IDS = frozenset({"u2"})

PermissionCheck = Callable[[str, str, Project | None], bool]


def has_permission(user_id: str, action: str, project: Project | None = None) -> bool:
    if user_id in ADMIN_USER_IDS:
        return True
    if action == Permission.MANAGE_PROJECT:
        if user_id in PROJECT_MANAGER_USER_IDS:
            return True
        return project is not None and project.lead_id == user_id
    return True
