"""Public API surface for issuekit."""

__version__ = "1.0.0"

from issuekit.core.config import load_config
from issuekit.core.contracts.config import StorageConfig
from issuekit.core.contracts.exceptions import (
    ConfigError,
    IssueKitError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    TransitionRejectedError,
)
from issuekit.core.contracts.issue import Issue, IssueCreate, IssuePatch, IssuePriority, IssueStatus, IssueType
from issuekit.core.contracts.project import Project, ProjectCreate, ProjectType
from issuekit.core.contracts.storage import AppStorage
from issuekit.core.domain import (
    build_project_stats,
    evaluate_automation_condition,
    has_permission,
    is_transition_allowed,
    select_recent_issues,
)
from issuekit.core.jql import execute_jql, parse_jql
from issuekit.storage import SQLiteStorageAdapter, StorageAdapter, WebStorageAdapter, create_storage

__all__ = [
    "AppStorage",
    "ConfigError",
    "Issue",
    "IssueCreate",
    "IssueKitError",
    "IssuePatch",
    "IssuePriority",
    "IssueStatus",
    "IssueType",
    "NotFoundError",
    "PermissionDeniedError",
    "Project",
    "ProjectCreate",
    "ProjectType",
    "SQLiteStorageAdapter",
    "StorageAdapter",
    "StorageConfig",
    "StorageError",
    "TransitionRejectedError",
    "WebStorageAdapter",
    "__version__",
    "build_project_stats",
    "create_storage",
    "evaluate_automation_condition",
    "execute_jql",
    "has_permission",
    "is_transition_allowed",
    "load_config",
    "parse_jql",
    "select_recent_issues",
]
