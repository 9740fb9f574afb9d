"""Backend-agnostic domain functions. They take plain data, never storage handles."""

from issuekit.core.domain.automation import (
    evaluate_automation_condition,
    select_rules,
    sort_automation_logs_by_executed_at,
)
from issuekit.core.domain.notifications import (
    NotificationDraft,
    build_notifications,
    notification_title,
    resolve_recipients,
    resolve_scheme,
    status_change_event,
)
from issuekit.core.domain.permissions import Permission, PermissionCheck, has_permission
from issuekit.core.domain.recent import DEFAULT_RECENT_LIMIT, select_recent_issues
from issuekit.core.domain.stats import build_project_stats
from issuekit.core.domain.workflow import allowed_transitions, is_transition_allowed, resolve_workflow

__all__ = [
    "DEFAULT_RECENT_LIMIT",
    "NotificationDraft",
    "Permission",
    "PermissionCheck",
    "allowed_transitions",
    "build_notifications",
    "build_project_stats",
    "evaluate_automation_condition",
    "has_permission",
    "is_transition_allowed",
    "notification_title",
    "resolve_recipients",
    "resolve_scheme",
    "resolve_workflow",
    "select_recent_issues",
    "select_rules",
    "sort_automation_logs_by_executed_at",
    "status_change_event",
]
