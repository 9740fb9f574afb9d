"""Default workflow transition table."""

from __future__ import annotations

from issuekit.core.contracts.issue import IssueStatus
from issuekit.core.contracts.project import WorkflowTable

WORKFLOW_TRANSITIONS: WorkflowTable = {
    IssueStatus.TODO: [IssueStatus.IN_PROGRESS, IssueStatus.DONE],
    IssueStatus.IN_PROGRESS: [IssueStatus.TODO, IssueStatus.IN_REVIEW, IssueStatus.DONE],
    IssueStatus.IN_REVIEW: [IssueStatus.IN_PROGRESS, IssueStatus.DONE],
    IssueStatus.DONE: [IssueStatus.IN_PROGRESS, IssueStatus.TODO],
}
