"""Storage adapter contract.

Every concrete backend (web local store, mobile SQLite, ...) exposes the same
repositories so callers never need to know *which* engine persists the data.

All methods are ``async``. Watch methods return an :data:`Unsubscribe`
callable; whether the listener fires again after later writes depends on
:attr:`Watchable.supports_push`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from types import TracebackType
from typing import Generic, Literal, TypeVar

from issuekit.core.contracts.automation import (
    AutomationLog,
    AutomationRule,
    AutomationRuleCreate,
    AutomationRulePatch,
    AutomationTrigger,
)
from issuekit.core.contracts.filter import SavedFilter, SavedFilterPatch
from issuekit.core.contracts.issue import Issue, IssueCreate, IssuePatch, IssueStatus, LinkType
from issuekit.core.contracts.notification import Notification
from issuekit.core.contracts.project import (
    Project,
    ProjectCreate,
    ProjectPatch,
    ProjectType,
    Sprint,
    SprintCreate,
    SprintPatch,
    Version,
    VersionCreate,
    VersionPatch,
)
from issuekit.core.contracts.stats import ProjectStats
from issuekit.core.contracts.user import User, UserPatch, UserStats

T = TypeVar("T")

Unsubscribe = Callable[[], None]
IssueUpdateResult = Issue | Literal[False] | None
"""``Issue`` on success, ``False`` for a rejected transition, ``None`` if missing."""


class Watchable(ABC, Generic[T]):
    @property
    @abstractmethod
    def supports_push(self) -> bool:
        """``True`` if listeners are re-invoked after every change to the table."""

    @abstractmethod
    async def watch_all(self, listener: Callable[[list[T]], None]) -> Unsubscribe: ...  # pragma: no cover

    @abstractmethod
    async def watch_by_id(self, id: str, listener: Callable[[T | None], None]) -> Unsubscribe: ...  # pragma: no cover


class ProjectsRepo(Watchable[Project]):
    @abstractmethod
    async def list(self) -> list[Project]: ...  # pragma: no cover

    @abstractmethod
    async def get(self, id: str) -> Project | None: ...  # pragma: no cover

    @abstractmethod
    async def get_by_key(self, key: str) -> Project | None: ...  # pragma: no cover

    @abstractmethod
    async def create(self, input: ProjectCreate) -> Project: ...  # pragma: no cover

    @abstractmethod
    async def update(self, id: str, patch: ProjectPatch) -> Project: ...  # pragma: no cover

    @abstractmethod
    async def toggle_star(self, id: str) -> None: ...  # pragma: no cover

    @abstractmethod
    async def remove(self, id: str) -> None:
        """Delete the project and every issue, sprint, version and rule it owns."""


class IssuesRepo(Watchable[Issue]):
    @abstractmethod
    async def list_all(self) -> list[Issue]: ...  # pragma: no cover

    @abstractmethod
    async def list_by_project(self, project_id: str) -> list[Issue]: ...  # pragma: no cover

    @abstractmethod
    async def list_for_user(self, user_id: str) -> list[Issue]: ...  # pragma: no cover

    @abstractmethod
    async def list_subtasks(self, parent_id: str) -> list[Issue]: ...  # pragma: no cover

    @abstractmethod
    async def get(self, id: str) -> Issue | None: ...  # pragma: no cover

    @abstractmethod
    async def search(self, jql: str, *, project_id: str | None = None) -> list[Issue]: ...  # pragma: no cover

    @abstractmethod
    async def create(self, input: IssueCreate) -> Issue: ...  # pragma: no cover

    @abstractmethod
    async def update(self, id: str, patch: IssuePatch) -> IssueUpdateResult:
        """Apply *patch*; returns ``False`` without writing if the status change is not allowed."""

    @abstractmethod
    async def update_with_result(self, id: str, patch: IssuePatch) -> Issue:
        """Like :meth:`update` but raises ``TransitionRejectedError`` / ``NotFoundError``."""

    @abstractmethod
    async def update_status(self, id: str, status: IssueStatus) -> IssueUpdateResult: ...  # pragma: no cover

    @abstractmethod
    async def remove(self, id: str) -> bool:
        """Delete the issue if the acting user holds ``delete_issue``."""

    @abstractmethod
    async def remove_with_result(self, id: str) -> None:
        """Like :meth:`remove` but raises ``NotFoundError`` / ``PermissionDeniedError``."""

    @abstractmethod
    async def add_comment(self, id: str, text: str) -> Issue | None: ...  # pragma: no cover

    @abstractmethod
    async def add_attachment(
        self,
        id: str,
        source: bytes | str | Path,
        *,
        file_name: str | None = None,
        file_type: str | None = None,
    ) -> Issue | None: ...  # pragma: no cover

    @abstractmethod
    async def add_link(self, id: str, target_id: str, link_type: LinkType) -> Issue | None: ...  # pragma: no cover

    @abstractmethod
    async def log_work(self, id: str, seconds: int, comment: str | None = None) -> Issue | None: ...  # pragma: no cover

    @abstractmethod
    async def toggle_watch(self, id: str) -> Issue | None: ...  # pragma: no cover


class SprintsRepo(Watchable[Sprint]):
    @abstractmethod
    async def list_by_project(self, project_id: str) -> list[Sprint]: ...  # pragma: no cover

    @abstractmethod
    async def get(self, id: str) -> Sprint | None: ...  # pragma: no cover

    @abstractmethod
    async def create(self, input: SprintCreate) -> Sprint: ...  # pragma: no cover

    @abstractmethod
    async def update(self, id: str, patch: SprintPatch) -> Sprint: ...  # pragma: no cover

    @abstractmethod
    async def start(self, id: str) -> Sprint: ...  # pragma: no cover

    @abstractmethod
    async def complete(self, id: str) -> Sprint: ...  # pragma: no cover


class VersionsRepo(Watchable[Version]):
    @abstractmethod
    async def list_by_project(self, project_id: str) -> list[Version]: ...  # pragma: no cover

    @abstractmethod
    async def get(self, id: str) -> Version | None: ...  # pragma: no cover

    @abstractmethod
    async def create(self, input: VersionCreate) -> Version: ...  # pragma: no cover

    @abstractmethod
    async def update(self, id: str, patch: VersionPatch) -> Version: ...  # pragma: no cover

    @abstractmethod
    async def remove(self, id: str) -> None: ...  # pragma: no cover


class NotificationsRepo(Watchable[Notification]):
    @abstractmethod
    async def list(self) -> list[Notification]:
        """All notifications, newest first."""

    @abstractmethod
    async def get(self, id: str) -> Notification | None: ...  # pragma: no cover

    @abstractmethod
    async def unread_count(self) -> int: ...  # pragma: no cover

    @abstractmethod
    async def mark_read(self, id: str) -> None: ...  # pragma: no cover

    @abstractmethod
    async def mark_all_read(self) -> None: ...  # pragma: no cover


class AutomationRulesRepo(Watchable[AutomationRule]):
    @abstractmethod
    async def list_by_project(self, project_id: str) -> list[AutomationRule]: ...  # pragma: no cover

    @abstractmethod
    async def get(self, id: str) -> AutomationRule | None: ...  # pragma: no cover

    @abstractmethod
    async def create(self, input: AutomationRuleCreate) -> AutomationRule: ...  # pragma: no cover

    @abstractmethod
    async def update(self, id: str, patch: AutomationRulePatch) -> AutomationRule: ...  # pragma: no cover

    @abstractmethod
    async def toggle_enabled(self, id: str, enabled: bool) -> None: ...  # pragma: no cover

    @abstractmethod
    async def remove(self, id: str) -> None: ...  # pragma: no cover

    @abstractmethod
    async def logs(self, rule_id: str) -> list[AutomationLog]:
        """Execution log for *rule_id*, newest first."""


class SavedFiltersRepo(Watchable[SavedFilter]):
    @abstractmethod
    async def list_by_owner(self, owner_id: str | None = None) -> list[SavedFilter]: ...  # pragma: no cover

    @abstractmethod
    async def get(self, id: str) -> SavedFilter | None: ...  # pragma: no cover

    @abstractmethod
    async def create(
        self,
        name: str,
        query: str,
        *,
        owner_id: str | None = None,
        is_jql_mode: bool = False,
    ) -> SavedFilter: ...  # pragma: no cover

    @abstractmethod
    async def update(self, id: str, patch: SavedFilterPatch) -> SavedFilter: ...  # pragma: no cover

    @abstractmethod
    async def remove(self, id: str) -> None: ...  # pragma: no cover

    @abstractmethod
    async def execute(self, id: str) -> list[Issue]: ...  # pragma: no cover


class UsersRepo(Watchable[User]):
    @abstractmethod
    async def list(self) -> list[User]: ...  # pragma: no cover

    @abstractmethod
    async def get(self, id: str) -> User | None: ...  # pragma: no cover

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None: ...  # pragma: no cover

    @abstractmethod
    async def register(self, email: str, name: str) -> User: ...  # pragma: no cover

    @abstractmethod
    async def update(self, id: str, patch: UserPatch) -> User: ...  # pragma: no cover

    @abstractmethod
    async def stats(self, user_id: str) -> UserStats: ...  # pragma: no cover


class SettingsStore(ABC):
    """Flat string key-value store, separate from the entity tables."""

    async def open(self) -> None:
        """Load or connect the backing store. No-op for purely in-memory stores."""

    async def close(self) -> None:
        """Release the backing store."""

    @abstractmethod
    async def get(self, key: str) -> str | None: ...  # pragma: no cover

    @abstractmethod
    async def set(self, key: str, value: str) -> None: ...  # pragma: no cover

    @abstractmethod
    async def remove(self, key: str) -> None: ...  # pragma: no cover

    @abstractmethod
    async def keys(self, prefix: str | None = None) -> list[str]: ...  # pragma: no cover

    @abstractmethod
    async def multi_remove(self, keys: list[str]) -> None: ...  # pragma: no cover


class AppStorage(ABC):
    projects: ProjectsRepo
    issues: IssuesRepo
    sprints: SprintsRepo
    versions: VersionsRepo
    notifications: NotificationsRepo
    automation_rules: AutomationRulesRepo
    saved_filters: SavedFiltersRepo
    users: UsersRepo
    settings: SettingsStore

    @abstractmethod
    async def open(self) -> None: ...  # pragma: no cover

    @abstractmethod
    async def close(self) -> None: ...  # pragma: no cover

    async def __aenter__(self) -> AppStorage:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    @abstractmethod
    def current_user_id(self) -> str: ...  # pragma: no cover

    @abstractmethod
    async def set_current_user(self, user_id: str) -> None: ...  # pragma: no cover

    @abstractmethod
    async def login_as(self, email: str) -> User | None: ...  # pragma: no cover

    @abstractmethod
    def has_permission(self, user_id: str, action: str, project: Project | None = None) -> bool: ...  # pragma: no cover

    @abstractmethod
    async def run_automation(self, trigger: AutomationTrigger, issue: Issue) -> None: ...  # pragma: no cover

    @abstractmethod
    async def record_view(self, issue_id: str) -> None: ...  # pragma: no cover

    @abstractmethod
    async def recent_issues(self, limit: int | None = None) -> list[Issue]: ...  # pragma: no cover

    @abstractmethod
    async def project_stats(self, project_id: str) -> ProjectStats: ...  # pragma: no cover

    @abstractmethod
    async def setup_initial_project(
        self, name: str, key: str, project_type: ProjectType
    ) -> Project: ...  # pragma: no cover

    @abstractmethod
    async def is_seeded(self) -> bool: ...  # pragma: no cover

    @abstractmethod
    async def clear_database(self) -> None: ...  # pragma: no cover

    @abstractmethod
    async def seed_demo(self) -> None:
        """Clear every table, then load the demo fixture set."""

    @abstractmethod
    async def reset(self) -> bool:
        """Wipe all tables and the session settings keys.

        Returns ``False`` if the store had to fall back to a best-effort clear.
        """
