from __future__ import annotations

from issuekit.core.contracts.filter import ViewHistory
from issuekit.core.contracts.issue import HistoryEntry, IssuePatch, IssueStatus
from issuekit.core.contracts.notification import Notification
from issuekit.core.contracts.project import Sprint, SprintPatch, SprintStatus
from tests.factories import make_issue, make_project


def test_rows_use_camel_case_field_names() -> None:
    row = make_issue(assignee_id="u2", watcher_ids=["u1"]).to_row()

    assert row["projectId"] == "p-1"
    assert row["assigneeId"] == "u2"
    assert row["watcherIds"] == ["u1"]
    assert row["status"] == "To Do"
    assert "project_id" not in row


def test_models_accept_either_spelling() -> None:
    issue = make_issue()

    assert type(issue).from_row(issue.to_row()) == issue
    assert type(issue).from_row({**issue.to_row(), "fixVersionId": "v-1"}).fix_version_id == "v-1"


def test_history_entry_serializes_from_key() -> None:
    entry = HistoryEntry(id="h-1", author_id="u1", field="status", from_="To Do", to="Done", created_at="t")

    row = entry.to_row()

    assert row["from"] == "To Do"
    assert HistoryEntry.from_row(row).from_ == "To Do"


def test_notification_recipient_persists_as_user_id() -> None:
    row = Notification(id="n-1", title="t", created_at="t", recipient_id="u2").to_row()

    assert row["userId"] == "u2"


def test_patch_reports_only_explicitly_set_fields() -> None:
    assert IssuePatch(status=IssueStatus.DONE).changes() == {"status": "Done"}
    assert IssuePatch(assignee_id=None).changes() == {"assignee_id": None}
    assert IssuePatch().changes() == {}


def test_legacy_planning_sprint_status_reads_as_future() -> None:
    sprint = Sprint.from_row({"id": "s-1", "projectId": "p-1", "name": "Sprint 1", "status": "planning"})

    assert sprint.status == SprintStatus.FUTURE
    assert SprintPatch(status="planning").status == SprintStatus.FUTURE


def test_view_history_id_combines_user_and_issue() -> None:
    assert ViewHistory.make_id("u1", "i-2") == "u1-i-2"


def test_project_column_limits_round_trip() -> None:
    project = make_project(column_settings={"In Progress": {"limit": 3}})

    row = project.to_row()

    assert row["columnSettings"] == {"In Progress": {"limit": 3}}
    assert type(project).from_row(row).column_settings[IssueStatus.IN_PROGRESS].limit == 3
