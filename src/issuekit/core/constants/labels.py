"""Display labels for enumerated values."""

from __future__ import annotations

from issuekit.core.contracts.issue import IssuePriority, IssueStatus, IssueType
from issuekit.core.contracts.project import ProjectCategory

STATUS_LABELS: dict[IssueStatus, str] = {
    IssueStatus.TODO: "未着手",
    IssueStatus.IN_PROGRESS: "進行中",
    IssueStatus.IN_REVIEW: "レビュー中",
    IssueStatus.DONE: "完了",
}

PRIORITY_LABELS: dict[IssuePriority, str] = {
    IssuePriority.HIGHEST: "最高",
    IssuePriority.HIGH: "高",
    IssuePriority.MEDIUM: "中",
    IssuePriority.LOW: "低",
    IssuePriority.LOWEST: "最低",
}

TYPE_LABELS: dict[IssueType, str] = {
    IssueType.STORY: "ストーリー",
    IssueType.BUG: "バグ",
    IssueType.TASK: "タスク",
    IssueType.EPIC: "エピック",
}

CATEGORY_LABELS: dict[ProjectCategory, str] = {
    ProjectCategory.SOFTWARE: "ソフトウェア",
    ProjectCategory.BUSINESS: "ビジネス",
}
