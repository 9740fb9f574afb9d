"""Recently viewed issue selection."""

from __future__ import annotations

from issuekit.core.contracts.filter import ViewHistory
from issuekit.core.contracts.issue import Issue

DEFAULT_RECENT_LIMIT = 10


def select_recent_issues(
    history: list[ViewHistory],
    issues: list[Issue],
    limit: int = DEFAULT_RECENT_LIMIT,
) -> list[Issue]:
    """Issues from the *limit* most recent views, newest first; views of deleted issues are skipped."""
    recent = sorted(history, key=lambda entry: entry.viewed_at, reverse=True)[:limit]
    by_id = {issue.id: issue for issue in issues}
    return [by_id[entry.issue_id] for entry in recent if entry.issue_id in by_id]
