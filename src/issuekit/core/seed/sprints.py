from __future__ import annotations

from issuekit.core.constants.notifications import BACKLOG_SPRINT_NAME
from issuekit.core.contracts.project import Sprint, SprintStatus

ACTIVE_SPRINT_ID = "s-1"
BACKLOG_SPRINT_ID = "s-backlog"


def get_seed_sprints(project_id: str) -> list[Sprint]:
    return [
        Sprint(id=ACTIVE_SPRINT_ID, name="Sprint 1", project_id=project_id, status=SprintStatus.ACTIVE),
        Sprint(id=BACKLOG_SPRINT_ID, name=BACKLOG_SPRINT_NAME, project_id=project_id, status=SprintStatus.FUTURE),
    ]
