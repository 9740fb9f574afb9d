"""Core contracts-domain exports."""

from issuekit.core.contracts.automation import (
    AutomationAction,
    AutomationLog,
    AutomationLogStatus,
    AutomationRule,
    AutomationRuleCreate,
    AutomationRulePatch,
    AutomationTrigger,
)
from issuekit.core.contracts.config import StorageConfig
from issuekit.core.contracts.exceptions import (
    ConfigError,
    IssueKitError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    TransitionRejectedError,
)
from issuekit.core.contracts.filter import SavedFilter, SavedFilterPatch, ViewHistory
from issuekit.core.contracts.issue import (
    Attachment,
    Comment,
    HistoryEntry,
    Issue,
    IssueCreate,
    IssueLink,
    IssuePatch,
    IssuePriority,
    IssueStatus,
    IssueType,
    LinkType,
    WorkLog,
)
from issuekit.core.contracts.notification import Notification, NotificationEvent, NotificationType, RecipientRole
from issuekit.core.contracts.project import (
    ColumnSetting,
    NotificationScheme,
    Project,
    ProjectCategory,
    ProjectCreate,
    ProjectPatch,
    ProjectType,
    Sprint,
    SprintCreate,
    SprintPatch,
    SprintStatus,
    Version,
    VersionCreate,
    VersionPatch,
    VersionStatus,
    WorkflowTable,
)
from issuekit.core.contracts.stats import EpicProgress, ProjectStats, WorkloadEntry
from issuekit.core.contracts.storage import (
    AppStorage,
    AutomationRulesRepo,
    IssuesRepo,
    IssueUpdateResult,
    NotificationsRepo,
    ProjectsRepo,
    SavedFiltersRepo,
    SettingsStore,
    SprintsRepo,
    Unsubscribe,
    UsersRepo,
    VersionsRepo,
    Watchable,
)
from issuekit.core.contracts.user import User, UserPatch, UserStats

__all__ = [
    "AppStorage",
    "Attachment",
    "AutomationAction",
    "AutomationLog",
    "AutomationLogStatus",
    "AutomationRule",
    "AutomationRuleCreate",
    "AutomationRulePatch",
    "AutomationRulesRepo",
    "AutomationTrigger",
    "ColumnSetting",
    "Comment",
    "ConfigError",
    "EpicProgress",
    "HistoryEntry",
    "Issue",
    "IssueCreate",
    "IssueKitError",
    "IssueLink",
    "IssuePatch",
    "IssuePriority",
    "IssueStatus",
    "IssueType",
    "IssueUpdateResult",
    "IssuesRepo",
    "LinkType",
    "NotFoundError",
    "Notification",
    "NotificationEvent",
    "NotificationScheme",
    "NotificationType",
    "NotificationsRepo",
    "PermissionDeniedError",
    "Project",
    "ProjectCategory",
    "ProjectCreate",
    "ProjectPatch",
    "ProjectStats",
    "ProjectType",
    "ProjectsRepo",
    "RecipientRole",
    "SavedFilter",
    "SavedFilterPatch",
    "SavedFiltersRepo",
    "SettingsStore",
    "Sprint",
    "SprintCreate",
    "SprintPatch",
    "SprintStatus",
    "SprintsRepo",
    "StorageConfig",
    "StorageError",
    "TransitionRejectedError",
    "Unsubscribe",
    "User",
    "UserPatch",
    "UserStats",
    "UsersRepo",
    "Version",
    "VersionCreate",
    "VersionPatch",
    "VersionStatus",
    "VersionsRepo",
    "ViewHistory",
    "Watchable",
    "WorkLog",
    "WorkflowTable",
    "WorkloadEntry",
]
