"""Project aggregates: workload per user and epic completion."""

from __future__ import annotations

import math

from issuekit.core.contracts.issue import Issue, IssueStatus, IssueType
from issuekit.core.contracts.stats import EpicProgress, ProjectStats, WorkloadEntry
from issuekit.core.contracts.user import User


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def build_project_stats(issues: list[Issue], users: list[User]) -> ProjectStats:
    workload = [
        WorkloadEntry(
            user_id=user.id,
            user_name=user.name,
            count=sum(1 for issue in issues if issue.assignee_id == user.id),
        )
        for user in users
    ]

    epic_progress: list[EpicProgress] = []
    for epic in (issue for issue in issues if issue.type == IssueType.EPIC):
        children = [issue for issue in issues if issue.parent_id == epic.id]
        done = sum(1 for child in children if child.status == IssueStatus.DONE)
        percent = _round_half_up(done / len(children) * 100) if children else 0
        epic_progress.append(EpicProgress(id=epic.id, title=epic.title, percent=percent))

    return ProjectStats(workload=workload, epic_progress=epic_progress)
