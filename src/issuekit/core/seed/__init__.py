"""Deterministic demo fixtures used by ``seed_demo``."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from issuekit.core.contracts.issue import Issue
from issuekit.core.contracts.notification import Notification
from issuekit.core.contracts.project import Project, Sprint
from issuekit.core.contracts.user import User
from issuekit.core.seed.issues import get_seed_issues
from issuekit.core.seed.notifications import get_seed_notifications
from issuekit.core.seed.projects import DEMO_PROJECT_ID, get_seed_projects
from issuekit.core.seed.sprints import ACTIVE_SPRINT_ID, BACKLOG_SPRINT_ID, get_seed_sprints
from issuekit.core.seed.users import get_seed_users


@dataclass
class SeedData:
    users: list[User] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    sprints: list[Sprint] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)
    notifications: list[Notification] = field(default_factory=list)


def _iso(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_seed_data(*, recipient_id: str | None = None, now: datetime | None = None) -> SeedData:
    """Assemble the full demo fixture set: three users, one Scrum project, two sprints, five issues."""
    moment = now or datetime.now(UTC)
    now_iso = _iso(moment)
    yesterday_iso = _iso(moment - timedelta(days=1))

    projects = get_seed_projects()
    data = SeedData(users=get_seed_users(), projects=projects)
    if not projects:
        return data

    project = projects[0]
    data.sprints = get_seed_sprints(project.id)
    sprint_id = data.sprints[0].id if data.sprints else ACTIVE_SPRINT_ID
    backlog_id = data.sprints[1].id if len(data.sprints) > 1 else BACKLOG_SPRINT_ID
    data.issues = get_seed_issues(
        project_id=project.id,
        sprint_id=sprint_id,
        backlog_sprint_id=backlog_id,
        now_iso=now_iso,
        yesterday_iso=yesterday_iso,
    )
    data.notifications = get_seed_notifications(now_iso, recipient_id)
    return data


__all__ = [
    "ACTIVE_SPRINT_ID",
    "BACKLOG_SPRINT_ID",
    "DEMO_PROJECT_ID",
    "SeedData",
    "build_seed_data",
    "get_seed_issues",
    "get_seed_notifications",
    "get_seed_projects",
    "get_seed_sprints",
    "get_seed_users",
]
