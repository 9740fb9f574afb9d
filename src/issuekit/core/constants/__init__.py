"""Shared constants: workflow, notification scheme, labels and settings keys."""

from issuekit.core.constants.labels import CATEGORY_LABELS, PRIORITY_LABELS, STATUS_LABELS, TYPE_LABELS
from issuekit.core.constants.notifications import (
    AUTOMATION_COMMENT,
    AUTOMATION_FAILURE_MESSAGE,
    AUTOMATION_SUCCESS_MESSAGE,
    BACKLOG_SPRINT_NAME,
    DEFAULT_NOTIFICATION_SCHEME,
    DEFAULT_NOTIFICATION_TITLE,
    NOTIFICATION_TITLES,
    UNTITLED_ISSUE,
)
from issuekit.core.constants.settings import (
    DASHBOARD_GADGETS_PREFIX,
    RESET_KEYS,
    SESSION_KEYS,
    SettingsKey,
    dashboard_gadgets_key,
)
from issuekit.core.constants.workflow import WORKFLOW_TRANSITIONS

__all__ = [
    "AUTOMATION_COMMENT",
    "AUTOMATION_FAILURE_MESSAGE",
    "AUTOMATION_SUCCESS_MESSAGE",
    "BACKLOG_SPRINT_NAME",
    "CATEGORY_LABELS",
    "DASHBOARD_GADGETS_PREFIX",
    "DEFAULT_NOTIFICATION_SCHEME",
    "DEFAULT_NOTIFICATION_TITLE",
    "NOTIFICATION_TITLES",
    "PRIORITY_LABELS",
    "RESET_KEYS",
    "SESSION_KEYS",
    "STATUS_LABELS",
    "SettingsKey",
    "TYPE_LABELS",
    "UNTITLED_ISSUE",
    "WORKFLOW_TRANSITIONS",
    "dashboard_gadgets_key",
]
