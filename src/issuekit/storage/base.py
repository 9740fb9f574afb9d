"""Shared adapter orchestration.

:class:`StorageAdapter` implements every :class:`~issuekit.core.contracts.storage.AppStorage`
operation on top of a :class:`RowStore`, the handful of row primitives a
backend has to provide. Workflow gating, notification fan-out, automation and
audit history all live here, so the web and mobile adapters share one code
path and cannot drift apart.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Iterable
from contextlib import AbstractAsyncContextManager
from contextvars import ContextVar
from typing import Any

from issuekit.core.constants.notifications import (
    AUTOMATION_COMMENT,
    AUTOMATION_FAILURE_MESSAGE,
    AUTOMATION_SUCCESS_MESSAGE,
)
from issuekit.core.constants.settings import DASHBOARD_GADGETS_PREFIX, RESET_KEYS, SESSION_KEYS, SettingsKey
from issuekit.core.contracts.automation import (
    AutomationAction,
    AutomationLog,
    AutomationLogStatus,
    AutomationRule,
    AutomationTrigger,
)
from issuekit.core.contracts.config import StorageConfig
from issuekit.core.contracts.exceptions import StorageError
from issuekit.core.contracts.filter import ViewHistory
from issuekit.core.contracts.issue import Issue, IssuePatch, IssuePriority
from issuekit.core.contracts.notification import Notification
from issuekit.core.contracts.project import Project, ProjectCreate, ProjectType
from issuekit.core.contracts.stats import ProjectStats
from issuekit.core.contracts.storage import AppStorage, SettingsStore, Unsubscribe
from issuekit.core.contracts.user import User
from issuekit.core.domain.automation import evaluate_automation_condition, select_rules
from issuekit.core.domain.notifications import build_notifications, resolve_scheme
from issuekit.core.domain.permissions import PermissionCheck, has_permission
from issuekit.core.domain.recent import select_recent_issues
from issuekit.core.domain.stats import build_project_stats
from issuekit.core.seed import build_seed_data
from issuekit.core.utils import new_id, now_iso
from issuekit.storage.repos import (
    StoredAutomationRulesRepo,
    StoredIssuesRepo,
    StoredNotificationsRepo,
    StoredProjectsRepo,
    StoredSavedFiltersRepo,
    StoredSprintsRepo,
    StoredUsersRepo,
    StoredVersionsRepo,
)
from issuekit.storage.schema import ALL_TABLES, Row, Table

logger = logging.getLogger(__name__)

_automation_running: ContextVar[bool] = ContextVar("issuekit_automation_running", default=False)


class TaskReentrantLock:
    """``asyncio.Lock`` that the task holding it may acquire again.

    Used to serialize write transactions while letting a transaction call
    helpers that open their own (nested) transaction.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._owner: asyncio.Task[Any] | None = None
        self._depth = 0

    async def acquire(self) -> bool:
        """Acquire the lock; returns ``True`` if this call took the outermost hold."""
        task = asyncio.current_task()
        if task is not None and self._owner is task:
            self._depth += 1
            return False
        await self._lock.acquire()
        self._owner = task
        self._depth = 1
        return True

    def release(self) -> None:
        self._depth -= 1
        if self._depth == 0:
            self._owner = None
            self._lock.release()


class RowStore(ABC):
    """Row-level primitives over a single backing store.

    Implementations translate engine failures into :class:`StorageError` so the
    orchestration layer can apply its fallbacks without knowing the engine.
    """

    @property
    @abstractmethod
    def supports_push(self) -> bool: ...  # pragma: no cover

    @property
    @abstractmethod
    def is_open(self) -> bool: ...  # pragma: no cover

    @abstractmethod
    async def open(self) -> None: ...  # pragma: no cover

    @abstractmethod
    async def close(self) -> None: ...  # pragma: no cover

    @abstractmethod
    async def get(self, table: Table, id: str) -> Row | None: ...  # pragma: no cover

    @abstractmethod
    async def all(self, table: Table) -> list[Row]:
        """Every row of *table* in insertion order."""

    @abstractmethod
    async def where(self, table: Table, field: str, value: Any) -> list[Row]:
        """Rows whose *field* equals *value*; ``None`` matches missing or null fields."""

    async def count(self, table: Table, field: str, value: Any) -> int:
        return len(await self.where(table, field, value))

    @abstractmethod
    async def put(self, table: Table, row: Row) -> None:
        """Insert *row*, or replace the row with the same id in place."""

    async def put_many(self, table: Table, rows: Iterable[Row]) -> None:
        async with self.transaction():
            for row in rows:
                await self.put(table, row)

    async def patch(self, table: Table, id: str, changes: Row) -> Row | None:
        """Shallow-merge *changes* into an existing row; returns ``None`` if it is missing."""
        async with self.transaction():
            row = await self.get(table, id)
            if row is None:
                return None
            merged = {**row, **changes}
            await self.put(table, merged)
            return merged

    @abstractmethod
    async def delete(self, table: Table, ids: Iterable[str]) -> None: ...  # pragma: no cover

    @abstractmethod
    async def clear(self, tables: Iterable[Table]) -> None: ...  # pragma: no cover

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Atomic write scope; nested scopes join the outermost one."""

    @abstractmethod
    async def drop(self) -> None:
        """Destroy the store and recreate it empty."""

    @abstractmethod
    async def subscribe(
        self,
        table: Table,
        fetch: Callable[[], Awaitable[Any]],
        listener: Callable[[Any], None],
    ) -> Unsubscribe:
        """Call *listener* with ``await fetch()`` now, and again after changes if :attr:`supports_push`."""


class StorageAdapter(AppStorage):
    """:class:`AppStorage` implemented over a :class:`RowStore` and a :class:`SettingsStore`.

    Args:
        rows: Entity row store.
        settings: Flat key-value settings store.
        config: Numbering, defaults and limits. Defaults to ``StorageConfig()``.
        permissions: Permission predicate; defaults to the built-in placeholder model.
    """

    backend_name = "base"

    def __init__(
        self,
        rows: RowStore,
        settings: SettingsStore,
        config: StorageConfig | None = None,
        *,
        permissions: PermissionCheck = has_permission,
    ) -> None:
        self._rows = rows
        self.settings = settings
        self._config = config or StorageConfig()
        self._permissions = permissions
        self._current_user_id = self._config.default_user_id

        self.projects = StoredProjectsRepo(self)
        self.issues = StoredIssuesRepo(self)
        self.sprints = StoredSprintsRepo(self)
        self.versions = StoredVersionsRepo(self)
        self.notifications = StoredNotificationsRepo(self)
        self.automation_rules = StoredAutomationRulesRepo(self)
        self.saved_filters = StoredSavedFiltersRepo(self)
        self.users = StoredUsersRepo(self)

    @property
    def rows(self) -> RowStore:
        return self._rows

    @property
    def config(self) -> StorageConfig:
        return self._config

    @property
    def supports_push(self) -> bool:
        return self._rows.supports_push

    # -- lifecycle --------------------------------------------------------

    async def open(self) -> None:
        await self._rows.open()
        await self.settings.open()
        stored = await self.settings.get(SettingsKey.CURRENT_USER_ID)
        if stored:
            self._current_user_id = stored
        else:
            await self.settings.set(SettingsKey.CURRENT_USER_ID, self._current_user_id)
        logger.debug("%s storage opened (current user %s)", self.backend_name, self._current_user_id)

    async def close(self) -> None:
        await self._rows.close()
        await self.settings.close()
        logger.debug("%s storage closed", self.backend_name)

    # -- session ----------------------------------------------------------

    @property
    def current_user_id(self) -> str:
        return self._current_user_id

    async def set_current_user(self, user_id: str) -> None:
        self._current_user_id = user_id
        await self.settings.set(SettingsKey.CURRENT_USER_ID, user_id)
        await self.settings.set(SettingsKey.IS_LOGGED_IN, "true")

    async def login_as(self, email: str) -> User | None:
        user = await self.users.get_by_email(email)
        if user is None:
            logger.info("login failed: no user with email %s", email)
            return None
        await self.set_current_user(user.id)
        return user

    def has_permission(self, user_id: str, action: str, project: Project | None = None) -> bool:
        return self._permissions(user_id, action, project)

    # -- notifications ----------------------------------------------------

    async def dispatch_notifications(self, event: str, issue: Issue) -> list[Notification]:
        """Persist one unread notification per recipient the project's scheme names for *event*."""
        project = await self.projects.get(issue.project_id)
        drafts = build_notifications(resolve_scheme(project), event, issue, self._current_user_id)
        created_at = now_iso()
        notifications = [
            Notification(
                id=new_id("n"),
                title=draft.title,
                description=draft.description,
                read=False,
                created_at=created_at,
                type=draft.type,
                issue_id=draft.issue_id,
                recipient_id=draft.recipient_id,
            )
            for draft in drafts
        ]
        if notifications:
            await self._rows.put_many(Table.NOTIFICATIONS, [item.to_row() for item in notifications])
            logger.debug("%s on %s notified %d user(s)", event, issue.key, len(notifications))
        return notifications

    # -- automation -------------------------------------------------------

    async def run_automation(self, trigger: AutomationTrigger, issue: Issue) -> None:
        """Run every enabled rule of the issue's project registered for *trigger*.

        Rules run in storage order. A failing action is recorded as a failure
        log entry and never propagates. Actions performed by a rule do not
        start another automation run.
        """
        if _automation_running.get():
            logger.debug("skipping nested %s automation for %s", trigger, issue.key)
            return

        rules = select_rules(await self.automation_rules.list_by_project(issue.project_id), trigger)
        token = _automation_running.set(True)
        try:
            for rule in rules:
                if not evaluate_automation_condition(rule.condition, issue):
                    logger.debug("rule %s condition %r not met for %s", rule.id, rule.condition, issue.key)
                    continue
                await self._execute_rule(rule, issue)
        finally:
            _automation_running.reset(token)

    async def _execute_rule(self, rule: AutomationRule, issue: Issue) -> None:
        try:
            await self._apply_action(rule.action, issue)
        except Exception as exc:
            logger.exception("automation rule %s failed on %s", rule.id, issue.key)
            message = AUTOMATION_FAILURE_MESSAGE.format(error=exc)
            await self._append_automation_log(rule, AutomationLogStatus.FAILURE, message)
            return

        executed_at = await self._append_automation_log(
            rule,
            AutomationLogStatus.SUCCESS,
            AUTOMATION_SUCCESS_MESSAGE.format(name=rule.name),
        )
        await self._rows.patch(Table.AUTOMATION_RULES, rule.id, {"lastRun": executed_at})

    async def _apply_action(self, action: AutomationAction, issue: Issue) -> None:
        if action == AutomationAction.ASSIGN_REPORTER:
            await self.issues.update(issue.id, IssuePatch(assignee_id=issue.reporter_id))
        elif action == AutomationAction.ADD_COMMENT:
            await self.issues.add_comment(issue.id, AUTOMATION_COMMENT)
        elif action == AutomationAction.SET_PRIORITY_HIGH:
            await self.issues.update(issue.id, IssuePatch(priority=IssuePriority.HIGH))
        else:
            raise ValueError(f"unknown automation action: {action}")

    async def _append_automation_log(self, rule: AutomationRule, status: AutomationLogStatus, message: str) -> str:
        log = AutomationLog(id=new_id("log"), rule_id=rule.id, status=status, message=message, executed_at=now_iso())
        await self._rows.put(Table.AUTOMATION_LOGS, log.to_row())
        return log.executed_at

    # -- views and aggregates ---------------------------------------------

    async def record_view(self, issue_id: str) -> None:
        entry = ViewHistory(
            id=ViewHistory.make_id(self._current_user_id, issue_id),
            user_id=self._current_user_id,
            issue_id=issue_id,
            viewed_at=now_iso(),
        )
        await self._rows.put(Table.VIEW_HISTORY, entry.to_row())

    async def recent_issues(self, limit: int | None = None) -> list[Issue]:
        history = [
            ViewHistory.from_row(row)
            for row in await self._rows.where(Table.VIEW_HISTORY, "userId", self._current_user_id)
        ]
        if not history:
            return []
        issues: list[Issue] = []
        for issue_id in dict.fromkeys(entry.issue_id for entry in history):
            issue = await self.issues.get(issue_id)
            if issue is not None:
                issues.append(issue)
        return select_recent_issues(history, issues, limit or self._config.recent_issue_limit)

    async def project_stats(self, project_id: str) -> ProjectStats:
        return build_project_stats(await self.issues.list_by_project(project_id), await self.users.list())

    async def setup_initial_project(self, name: str, key: str, project_type: ProjectType) -> Project:
        project = await self.projects.create(ProjectCreate(name=name, key=key, type=project_type))
        await self.settings.set(SettingsKey.HAS_SETUP, "true")
        return project

    # -- seed and reset ---------------------------------------------------

    async def is_seeded(self) -> bool:
        return bool(await self._rows.all(Table.USERS))

    async def clear_database(self) -> None:
        async with self._rows.transaction():
            await self._rows.clear(ALL_TABLES)

    async def seed_demo(self) -> None:
        data = build_seed_data(recipient_id=self._config.default_user_id)
        try:
            async with self._rows.transaction():
                await self._rows.clear(ALL_TABLES)
                await self._rows.put_many(Table.USERS, [user.to_row() for user in data.users])
                await self._rows.put_many(Table.PROJECTS, [project.to_row() for project in data.projects])
                await self._rows.put_many(Table.SPRINTS, [sprint.to_row() for sprint in data.sprints])
                await self._rows.put_many(Table.ISSUES, [issue.to_row() for issue in data.issues])
                await self._rows.put_many(Table.NOTIFICATIONS, [item.to_row() for item in data.notifications])
        except StorageError:
            logger.exception("seeding %s storage failed, changes rolled back", self.backend_name)
            raise
        logger.info(
            "seeded %s storage: %d users, %d projects, %d issues",
            self.backend_name,
            len(data.users),
            len(data.projects),
            len(data.issues),
        )

    async def reset(self) -> bool:
        try:
            await self._rows.drop()
            await self._remove_reset_settings()
        except StorageError:
            logger.warning("resetting %s storage failed, clearing tables one by one", self.backend_name, exc_info=True)
            await self._reopen_rows()
            await self._clear_tables_individually()
            try:
                await self._remove_reset_settings()
            except StorageError:
                logger.error("could not remove reset settings, removing session keys only", exc_info=True)
                await self.settings.multi_remove(list(SESSION_KEYS))
            self._current_user_id = self._config.default_user_id
            return False

        self._current_user_id = self._config.default_user_id
        logger.info("%s storage reset", self.backend_name)
        return True

    async def _remove_reset_settings(self) -> None:
        dashboard_keys = await self.settings.keys(DASHBOARD_GADGETS_PREFIX)
        await self.settings.multi_remove([*RESET_KEYS, *dashboard_keys])

    async def _reopen_rows(self) -> None:
        if self._rows.is_open:
            return
        try:
            await self._rows.open()
        except StorageError:
            logger.error("could not reopen %s storage", self.backend_name, exc_info=True)

    async def _clear_tables_individually(self) -> None:
        for table in ALL_TABLES:
            try:
                await self._rows.clear([table])
            except StorageError:
                logger.error("could not clear table %s", table, exc_info=True)
