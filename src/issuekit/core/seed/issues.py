"""Demo issue fixtures for the seeded project."""

from __future__ import annotations

from issuekit.core.contracts.issue import Issue, IssuePriority, IssueStatus, IssueType


def get_seed_issues(
    *,
    project_id: str,
    sprint_id: str,
    backlog_sprint_id: str,
    now_iso: str,
    yesterday_iso: str,
) -> list[Issue]:
    def issue(
        number: int,
        title: str,
        type: IssueType,
        status: IssueStatus,
        priority: IssuePriority,
        *,
        assignee_id: str | None,
        reporter_id: str,
        labels: list[str],
        story_points: int,
        watcher_ids: list[str],
        sprint: str = sprint_id,
        created_at: str = now_iso,
    ) -> Issue:
        return Issue(
            id=f"i-{number}",
            key=f"DEMO-{number}",
            project_id=project_id,
            title=title,
            type=type,
            status=status,
            priority=priority,
            assignee_id=assignee_id,
            reporter_id=reporter_id,
            sprint_id=sprint,
            labels=labels,
            story_points=story_points,
            watcher_ids=watcher_ids,
            created_at=created_at,
            updated_at=now_iso,
        )

    return [
        issue(
            1,
            "ログイン画面の実装",
            IssueType.STORY,
            IssueStatus.DONE,
            IssuePriority.HIGH,
            assignee_id="u1",
            reporter_id="u2",
            labels=["frontend"],
            story_points=5,
            watcher_ids=["u1"],
            created_at=yesterday_iso,
        ),
        issue(
            2,
            "APIのCORSエラー修正",
            IssueType.BUG,
            IssueStatus.IN_PROGRESS,
            IssuePriority.HIGHEST,
            assignee_id="u1",
            reporter_id="u1",
            labels=["backend", "bug"],
            story_points=3,
            watcher_ids=["u1", "u2"],
        ),
        issue(
            3,
            "ダッシュボードのデザイン",
            IssueType.TASK,
            IssueStatus.TODO,
            IssuePriority.MEDIUM,
            assignee_id="u3",
            reporter_id="u1",
            labels=["design"],
            story_points=2,
            watcher_ids=[],
        ),
        issue(
            4,
            "ユーザー通知機能",
            IssueType.STORY,
            IssueStatus.TODO,
            IssuePriority.HIGH,
            assignee_id="u1",
            reporter_id="u2",
            labels=["feature"],
            story_points=8,
            watcher_ids=[],
        ),
        issue(
            5,
            "リリースマニュアルの作成",
            IssueType.TASK,
            IssueStatus.TODO,
            IssuePriority.LOW,
            assignee_id=None,
            reporter_id="u1",
            labels=["docs"],
            story_points=1,
            watcher_ids=[],
            sprint=backlog_sprint_id,
        ),
    ]
