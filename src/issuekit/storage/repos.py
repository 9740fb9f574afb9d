"""Repository implementations shared by every adapter.

Each repository reads and writes through the owning adapter's
:class:`~issuekit.storage.base.RowStore` and converts rows to pydantic models
at the boundary.
"""

from __future__ import annotations

import asyncio
import copy
import logging
import mimetypes
from collections.abc import Callable
from pathlib import Path
from types import NoneType
from typing import TYPE_CHECKING, Any, Generic, TypeVar, get_args
from urllib.parse import quote

from pydantic.fields import FieldInfo

from issuekit.core.constants.notifications import DEFAULT_NOTIFICATION_SCHEME, UNTITLED_ISSUE
from issuekit.core.constants.workflow import WORKFLOW_TRANSITIONS
from issuekit.core.contracts.automation import (
    AutomationLog,
    AutomationRule,
    AutomationRuleCreate,
    AutomationRulePatch,
    AutomationTrigger,
)
from issuekit.core.contracts.base import StorageModel
from issuekit.core.contracts.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    TransitionRejectedError,
)
from issuekit.core.contracts.filter import SavedFilter, SavedFilterPatch
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
from issuekit.core.contracts.notification import Notification, NotificationEvent
from issuekit.core.contracts.project import (
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
)
from issuekit.core.contracts.storage import (
    AutomationRulesRepo,
    IssuesRepo,
    IssueUpdateResult,
    NotificationsRepo,
    ProjectsRepo,
    SavedFiltersRepo,
    SprintsRepo,
    Unsubscribe,
    UsersRepo,
    VersionsRepo,
)
from issuekit.core.contracts.user import User, UserPatch, UserStats
from issuekit.core.domain.automation import sort_automation_logs_by_executed_at
from issuekit.core.domain.notifications import status_change_event
from issuekit.core.domain.permissions import Permission
from issuekit.core.domain.workflow import is_transition_allowed, resolve_workflow
from issuekit.core.jql import execute_jql
from issuekit.core.utils import new_id, now_iso, snake_to_camel, to_data_uri
from issuekit.storage.schema import PROJECT_OWNED_TABLES, TABLES, Row, Table

if TYPE_CHECKING:
    from issuekit.storage.base import RowStore, StorageAdapter

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=StorageModel)

_DEFAULT_MIME_TYPE = "application/octet-stream"


def _is_nullable(info: FieldInfo) -> bool:
    return NoneType in get_args(info.annotation)


def row_changes(model: type[StorageModel], changes: dict[str, Any]) -> Row:
    """Translate python-named patch values to persisted field names.

    An explicit ``None`` clears a nullable field and is ignored for a
    required one.
    """
    row: Row = {}
    for name, value in changes.items():
        info = model.model_fields.get(name)
        if info is None:
            continue
        if value is None and not _is_nullable(info):
            continue
        row[info.alias or snake_to_camel(name)] = value
    return row


def _without_none(changes: dict[str, Any]) -> dict[str, Any]:
    return {name: value for name, value in changes.items() if value is not None}


class _TableRepo(Generic[M]):
    """Row access and watches for one table."""

    table: Table
    entity: str

    def __init__(self, storage: StorageAdapter) -> None:
        self._storage = storage
        self._model: type[M] = TABLES[self.table].model  # type: ignore[assignment]

    @property
    def _rows(self) -> RowStore:
        return self._storage.rows

    @property
    def supports_push(self) -> bool:
        return self._storage.supports_push

    def _load(self, row: Row) -> M:
        return self._model.from_row(row)

    async def get(self, id: str) -> M | None:
        row = await self._rows.get(self.table, id)
        return None if row is None else self._load(row)

    async def _all(self) -> list[M]:
        return [self._load(row) for row in await self._rows.all(self.table)]

    async def _where(self, field: str, value: Any) -> list[M]:
        return [self._load(row) for row in await self._rows.where(self.table, field, value)]

    async def _insert(self, entity: M) -> M:
        await self._rows.put(self.table, entity.to_row())
        return entity

    async def _apply(self, id: str, changes: dict[str, Any]) -> M:
        merged = await self._rows.patch(self.table, id, row_changes(self._model, changes))
        if merged is None:
            raise NotFoundError(self.entity, id)
        return self._load(merged)

    async def _remove(self, id: str) -> None:
        await self._rows.delete(self.table, [id])

    async def watch_all(self, listener: Callable[[list[M]], None]) -> Unsubscribe:
        return await self._rows.subscribe(self.table, self._all, listener)

    async def watch_by_id(self, id: str, listener: Callable[[M | None], None]) -> Unsubscribe:
        async def fetch() -> M | None:
            return await self.get(id)

        return await self._rows.subscribe(self.table, fetch, listener)


class StoredProjectsRepo(_TableRepo[Project], ProjectsRepo):
    table = Table.PROJECTS
    entity = "Project"

    async def list(self) -> list[Project]:
        return await self._all()

    async def get_by_key(self, key: str) -> Project | None:
        matches = await self._where("key", key)
        return matches[0] if matches else None

    async def create(self, input: ProjectCreate) -> Project:
        fields: dict[str, Any] = {
            "id": new_id("p"),
            "lead_id": self._storage.current_user_id,
            "category": ProjectCategory.SOFTWARE,
            "type": ProjectType.KANBAN,
            "starred": False,
            "workflow_settings": copy.deepcopy(WORKFLOW_TRANSITIONS),
            "notification_settings": copy.deepcopy(DEFAULT_NOTIFICATION_SCHEME),
        }
        fields.update(_without_none(input.changes()))
        project = await self._insert(Project(**fields))
        logger.debug("created project %s (%s)", project.key, project.id)
        return project

    async def update(self, id: str, patch: ProjectPatch) -> Project:
        return await self._apply(id, patch.changes())

    async def toggle_star(self, id: str) -> None:
        project = await self.get(id)
        if project is not None:
            await self._rows.patch(self.table, id, {"starred": not project.starred})

    async def remove(self, id: str) -> None:
        async with self._rows.transaction():
            for rule in await self._rows.where(Table.AUTOMATION_RULES, "projectId", id):
                logs = await self._rows.where(Table.AUTOMATION_LOGS, "ruleId", rule["id"])
                await self._rows.delete(Table.AUTOMATION_LOGS, [log["id"] for log in logs])
            for table in PROJECT_OWNED_TABLES:
                owned = await self._rows.where(table, "projectId", id)
                await self._rows.delete(table, [row["id"] for row in owned])
            await self._remove(id)
        logger.debug("removed project %s with its issues, sprints, versions and rules", id)


class StoredIssuesRepo(_TableRepo[Issue], IssuesRepo):
    """Issue persistence plus the workflow gate, history and side-effect dispatch."""

    table = Table.ISSUES
    entity = "Issue"

    async def list_all(self) -> list[Issue]:
        return await self._all()

    async def list_by_project(self, project_id: str) -> list[Issue]:
        return await self._where("projectId", project_id)

    async def list_for_user(self, user_id: str) -> list[Issue]:
        return await self._where("assigneeId", user_id)

    async def list_subtasks(self, parent_id: str) -> list[Issue]:
        return await self._where("parentId", parent_id)

    async def search(self, jql: str, *, project_id: str | None = None) -> list[Issue]:
        pool = await self.list_by_project(project_id) if project_id else await self.list_all()
        return execute_jql(jql, pool)

    async def _next_key(self, project: Project) -> str:
        siblings = await self._rows.where(self.table, "projectId", project.id)
        prefix = f"{project.key}-"
        highest = 0
        for row in siblings:
            suffix = str(row.get("key", "")).removeprefix(prefix)
            if suffix.isdigit():
                highest = max(highest, int(suffix))
        number = max(len(siblings) + self._storage.config.issue_key_offset, highest + 1)
        return f"{prefix}{number}"

    async def create(self, input: IssueCreate) -> Issue:
        project = await self._storage.projects.get(input.project_id)
        if project is None:
            raise NotFoundError("Project", input.project_id)

        actor = self._storage.current_user_id
        now = now_iso()
        status = input.status or IssueStatus.TODO
        fields: dict[str, Any] = {
            "id": new_id("i"),
            "key": await self._next_key(project),
            "type": IssueType.TASK,
            "status": status,
            "priority": IssuePriority.MEDIUM,
            "reporter_id": actor,
            "watcher_ids": [actor],
            "history": [
                HistoryEntry(id=new_id("h"), author_id=actor, field="status", from_=None, to=status, created_at=now)
            ],
            "created_at": now,
            "updated_at": now,
        }
        fields.update(_without_none(input.changes()))
        if not fields.get("title"):
            fields["title"] = UNTITLED_ISSUE
        issue = await self._insert(Issue(**fields))
        logger.debug("created issue %s in project %s", issue.key, project.key)

        await self._storage.dispatch_notifications(NotificationEvent.ISSUE_CREATED, issue)
        if issue.assignee_id and issue.assignee_id != actor:
            await self._storage.dispatch_notifications(NotificationEvent.ISSUE_ASSIGNED, issue)
        await self._storage.run_automation(AutomationTrigger.ISSUE_CREATED, issue)
        return await self.get(issue.id) or issue

    async def update(self, id: str, patch: IssuePatch) -> IssueUpdateResult:
        old_row = await self._rows.get(self.table, id)
        if old_row is None:
            return None
        old = self._load(old_row)
        actor = self._storage.current_user_id
        changes = row_changes(Issue, patch.changes())

        target = changes.get("status")
        if target is not None and target != old.status:
            project = await self._storage.projects.get(old.project_id)
            if not is_transition_allowed(resolve_workflow(project), old.status, target):
                logger.info("rejected %s transition %s -> %s", old.key, old.status, target)
                return False

        now = now_iso()
        history = [
            HistoryEntry(
                id=new_id("h"),
                author_id=actor,
                field=field,
                from_=old_row.get(field),
                to=value,
                created_at=now,
            ).to_row()
            for field, value in changes.items()
            if old_row.get(field) != value
        ]
        new_row = {
            **old_row,
            **changes,
            "updatedAt": max(now, old.updated_at),
            "history": [*old_row.get("history", []), *history],
        }
        await self._rows.put(self.table, new_row)
        updated = self._load(new_row)

        changed = {entry["field"] for entry in history}
        if "assigneeId" in changed and updated.assignee_id and updated.assignee_id != actor:
            await self._storage.dispatch_notifications(NotificationEvent.ISSUE_ASSIGNED, updated)
        if "status" in changed:
            await self._storage.dispatch_notifications(status_change_event(updated.status), updated)
            await self._storage.run_automation(AutomationTrigger.STATUS_CHANGED, updated)
        return await self.get(id)

    async def update_with_result(self, id: str, patch: IssuePatch) -> Issue:
        existing = await self.get(id)
        if existing is None:
            raise NotFoundError(self.entity, id)
        result = await self.update(id, patch)
        if result is False:
            raise TransitionRejectedError(id, existing.status, str(patch.status))
        if result is None:
            raise NotFoundError(self.entity, id)
        return result

    async def update_status(self, id: str, status: IssueStatus) -> IssueUpdateResult:
        result = await self.update(id, IssuePatch(status=status))
        if result is False:
            logger.warning("status transition to %s not allowed for issue %s", status, id)
        return result

    async def _may_delete(self, issue: Issue) -> bool:
        actor = self._storage.current_user_id
        project = await self._storage.projects.get(issue.project_id)
        if self._storage.has_permission(actor, Permission.DELETE_ISSUE, project):
            return True
        logger.info("user %s may not delete %s", actor, issue.key)
        return False

    async def remove(self, id: str) -> bool:
        issue = await self.get(id)
        if issue is None or not await self._may_delete(issue):
            return False
        await self._remove(id)
        return True

    async def remove_with_result(self, id: str) -> None:
        issue = await self.get(id)
        if issue is None:
            raise NotFoundError(self.entity, id)
        if not await self._may_delete(issue):
            raise PermissionDeniedError(Permission.DELETE_ISSUE, self._storage.current_user_id)
        await self._remove(id)

    async def _append(self, issue: Issue, field: str, item: StorageModel, *, touch: bool = True) -> Issue:
        changes: Row = {field: [*issue.to_row()[field], item.to_row()]}
        if touch:
            changes["updatedAt"] = max(now_iso(), issue.updated_at)
        merged = await self._rows.patch(self.table, issue.id, changes)
        if merged is None:
            raise NotFoundError(self.entity, issue.id)
        return self._load(merged)

    async def add_comment(self, id: str, text: str) -> Issue | None:
        issue = await self.get(id)
        if issue is None:
            return None
        comment = Comment(id=new_id("c"), author_id=self._storage.current_user_id, content=text, created_at=now_iso())
        updated = await self._append(issue, "comments", comment)
        await self._storage.dispatch_notifications(NotificationEvent.COMMENT_ADDED, updated)
        await self._storage.run_automation(AutomationTrigger.COMMENT_ADDED, updated)
        return await self.get(id)

    async def add_attachment(
        self,
        id: str,
        source: bytes | str | Path,
        *,
        file_name: str | None = None,
        file_type: str | None = None,
    ) -> Issue | None:
        """Attach a file to the issue, embedded as a ``data:`` URI.

        Args:
            id: Issue id.
            source: Raw bytes, or a path to read in full.
            file_name: Stored name; defaults to the path's name.
            file_type: MIME type; guessed from the name when omitted.

        Returns:
            The updated issue, or ``None`` if it does not exist.

        Raises:
            StorageError: If *source* is a path that cannot be read.
        """
        issue = await self.get(id)
        if issue is None:
            return None

        if isinstance(source, bytes):
            payload = source
            name = file_name or "attachment"
        else:
            path = Path(source)
            try:
                payload = await asyncio.to_thread(path.read_bytes)
            except OSError as exc:
                raise StorageError(f"failed reading attachment: {path}") from exc
            name = file_name or path.name
        mime_type = file_type or mimetypes.guess_type(name)[0] or _DEFAULT_MIME_TYPE

        attachment = Attachment(
            id=new_id("at"),
            file_name=name,
            file_type=mime_type,
            file_size=len(payload),
            data=to_data_uri(payload, mime_type),
            created_at=now_iso(),
        )
        return await self._append(issue, "attachments", attachment)

    async def add_link(self, id: str, target_id: str, link_type: LinkType) -> Issue | None:
        issue = await self.get(id)
        if issue is None:
            return None
        link = IssueLink(id=new_id("l"), type=link_type, outward_issue_id=target_id)
        return await self._append(issue, "links", link, touch=False)

    async def log_work(self, id: str, seconds: int, comment: str | None = None) -> Issue | None:
        issue = await self.get(id)
        if issue is None:
            return None
        work_log = WorkLog(
            id=new_id("wl"),
            author_id=self._storage.current_user_id,
            time_spent_seconds=seconds,
            comment=comment,
            created_at=now_iso(),
        )
        return await self._append(issue, "workLogs", work_log)

    async def toggle_watch(self, id: str) -> Issue | None:
        issue = await self.get(id)
        if issue is None:
            return None
        actor = self._storage.current_user_id
        if actor in issue.watcher_ids:
            watchers = [watcher for watcher in issue.watcher_ids if watcher != actor]
        else:
            watchers = [*issue.watcher_ids, actor]
        return await self._apply(id, {"watcher_ids": watchers})


class StoredSprintsRepo(_TableRepo[Sprint], SprintsRepo):
    table = Table.SPRINTS
    entity = "Sprint"

    async def list_by_project(self, project_id: str) -> list[Sprint]:
        return await self._where("projectId", project_id)

    async def create(self, input: SprintCreate) -> Sprint:
        count = await self._rows.count(self.table, "projectId", input.project_id)
        fields: dict[str, Any] = {
            "id": new_id("s"),
            "name": f"Sprint {count + 1}",
            "status": SprintStatus.FUTURE,
        }
        fields.update(_without_none(input.changes()))
        return await self._insert(Sprint(**fields))

    async def update(self, id: str, patch: SprintPatch) -> Sprint:
        return await self._apply(id, patch.changes())

    async def start(self, id: str) -> Sprint:
        return await self._apply(id, {"status": SprintStatus.ACTIVE})

    async def complete(self, id: str) -> Sprint:
        return await self._apply(id, {"status": SprintStatus.COMPLETED})


class StoredVersionsRepo(_TableRepo[Version], VersionsRepo):
    table = Table.VERSIONS
    entity = "Version"

    async def list_by_project(self, project_id: str) -> list[Version]:
        return await self._where("projectId", project_id)

    async def create(self, input: VersionCreate) -> Version:
        fields: dict[str, Any] = {"id": new_id("v"), "status": VersionStatus.UNRELEASED}
        fields.update(_without_none(input.changes()))
        return await self._insert(Version(**fields))

    async def update(self, id: str, patch: VersionPatch) -> Version:
        return await self._apply(id, patch.changes())

    async def remove(self, id: str) -> None:
        await self._remove(id)


class StoredNotificationsRepo(_TableRepo[Notification], NotificationsRepo):
    table = Table.NOTIFICATIONS
    entity = "Notification"

    async def list(self) -> list[Notification]:
        return sorted(await self._all(), key=lambda item: item.created_at, reverse=True)

    async def unread_count(self) -> int:
        return await self._rows.count(self.table, "read", False)

    async def mark_read(self, id: str) -> None:
        await self._rows.patch(self.table, id, {"read": True})

    async def mark_all_read(self) -> None:
        async with self._rows.transaction():
            for row in await self._rows.where(self.table, "read", False):
                await self._rows.put(self.table, {**row, "read": True})


class StoredAutomationRulesRepo(_TableRepo[AutomationRule], AutomationRulesRepo):
    table = Table.AUTOMATION_RULES
    entity = "AutomationRule"

    async def list_by_project(self, project_id: str) -> list[AutomationRule]:
        return await self._where("projectId", project_id)

    async def create(self, input: AutomationRuleCreate) -> AutomationRule:
        fields: dict[str, Any] = {"id": new_id("ar"), "enabled": True}
        fields.update(_without_none(input.changes()))
        return await self._insert(AutomationRule(**fields))

    async def update(self, id: str, patch: AutomationRulePatch) -> AutomationRule:
        return await self._apply(id, patch.changes())

    async def toggle_enabled(self, id: str, enabled: bool) -> None:
        await self._rows.patch(self.table, id, {"enabled": enabled})

    async def remove(self, id: str) -> None:
        async with self._rows.transaction():
            logs = await self._rows.where(Table.AUTOMATION_LOGS, "ruleId", id)
            await self._rows.delete(Table.AUTOMATION_LOGS, [log["id"] for log in logs])
            await self._remove(id)

    async def logs(self, rule_id: str) -> list[AutomationLog]:
        rows = await self._rows.where(Table.AUTOMATION_LOGS, "ruleId", rule_id)
        return sort_automation_logs_by_executed_at([AutomationLog.from_row(row) for row in rows])


class StoredSavedFiltersRepo(_TableRepo[SavedFilter], SavedFiltersRepo):
    table = Table.SAVED_FILTERS
    entity = "SavedFilter"

    async def list_by_owner(self, owner_id: str | None = None) -> list[SavedFilter]:
        if not owner_id:
            return await self._all()
        return await self._where("ownerId", owner_id)

    async def create(
        self,
        name: str,
        query: str,
        *,
        owner_id: str | None = None,
        is_jql_mode: bool = False,
    ) -> SavedFilter:
        saved = SavedFilter(
            id=new_id("f"),
            name=name,
            query=query,
            owner_id=owner_id or self._storage.current_user_id,
            is_favorite=False,
            is_jql_mode=is_jql_mode,
        )
        return await self._insert(saved)

    async def update(self, id: str, patch: SavedFilterPatch) -> SavedFilter:
        return await self._apply(id, patch.changes())

    async def remove(self, id: str) -> None:
        await self._remove(id)

    async def execute(self, id: str) -> list[Issue]:
        """Run a saved filter over every issue; a missing filter matches nothing."""
        saved = await self.get(id)
        if saved is None:
            logger.debug("saved filter %s not found", id)
            return []
        issues = await self._storage.issues.list_all()
        if saved.is_jql_mode:
            return execute_jql(saved.query, issues)
        needle = saved.query.strip().casefold()
        if not needle:
            return issues
        return [issue for issue in issues if needle in issue.title.casefold() or needle in issue.key.casefold()]


class StoredUsersRepo(_TableRepo[User], UsersRepo):
    table = Table.USERS
    entity = "User"

    async def list(self) -> list[User]:
        return await self._all()

    async def get_by_email(self, email: str) -> User | None:
        matches = await self._where("email", email)
        return matches[0] if matches else None

    async def register(self, email: str, name: str) -> User:
        if await self.get_by_email(email) is not None:
            raise StorageError(f"email already registered: {email}")
        user = User(
            id=new_id("u"),
            name=name,
            email=email,
            avatar_url=f"https://ui-avatars.com/api/?name={quote(name)}&background=random",
        )
        return await self._insert(user)

    async def update(self, id: str, patch: UserPatch) -> User:
        return await self._apply(id, patch.changes())

    async def stats(self, user_id: str) -> UserStats:
        if not user_id:
            return UserStats()
        return UserStats(
            assigned=await self._rows.count(Table.ISSUES, "assigneeId", user_id),
            reported=await self._rows.count(Table.ISSUES, "reporterId", user_id),
            leading=await self._rows.count(Table.PROJECTS, "leadId", user_id),
        )
