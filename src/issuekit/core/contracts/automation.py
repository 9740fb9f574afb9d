"""Automation rule contracts."""

from __future__ import annotations

from enum import StrEnum

from issuekit.core.contracts.base import PatchModel, StorageModel


class AutomationTrigger(StrEnum):
    ISSUE_CREATED = "issue_created"
    STATUS_CHANGED = "status_changed"
    COMMENT_ADDED = "comment_added"


class AutomationAction(StrEnum):
    ASSIGN_REPORTER = "assign_reporter"
    ADD_COMMENT = "add_comment"
    SET_PRIORITY_HIGH = "set_priority_high"


class AutomationLogStatus(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"


class AutomationRule(StorageModel):
    id: str
    project_id: str
    name: str
    description: str = ""
    trigger: AutomationTrigger
    condition: str = ""
    """``field op value`` expression; anything else always matches."""
    action: AutomationAction
    enabled: bool = True
    last_run: str | None = None


class AutomationRuleCreate(PatchModel):
    project_id: str
    name: str
    trigger: AutomationTrigger
    action: AutomationAction
    id: str | None = None
    description: str | None = None
    condition: str | None = None
    enabled: bool | None = None


class AutomationRulePatch(PatchModel):
    name: str | None = None
    description: str | None = None
    trigger: AutomationTrigger | None = None
    condition: str | None = None
    action: AutomationAction | None = None
    enabled: bool | None = None


class AutomationLog(StorageModel):
    """Immutable execution record."""

    id: str
    rule_id: str
    status: AutomationLogStatus
    message: str
    executed_at: str
