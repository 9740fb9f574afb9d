from __future__ import annotations

from issuekit.core.constants.workflow import WORKFLOW_TRANSITIONS
from issuekit.core.domain.workflow import allowed_transitions, is_transition_allowed, resolve_workflow
from tests.factories import make_project


def test_default_table_allows_todo_to_in_progress_and_done() -> None:
    assert is_transition_allowed(WORKFLOW_TRANSITIONS, "To Do", "In Progress")
    assert is_transition_allowed(WORKFLOW_TRANSITIONS, "To Do", "Done")


def test_default_table_rejects_todo_to_in_review() -> None:
    assert not is_transition_allowed(WORKFLOW_TRANSITIONS, "To Do", "In Review")


def test_same_status_is_always_allowed() -> None:
    assert is_transition_allowed({}, "In Review", "In Review")


def test_status_missing_from_table_reaches_nothing() -> None:
    workflow = {"To Do": ["Done"]}

    assert allowed_transitions(workflow, "Done") == []
    assert not is_transition_allowed(workflow, "Done", "To Do")


def test_resolve_workflow_prefers_project_override() -> None:
    custom = {"To Do": ["In Review"]}

    assert resolve_workflow(make_project(workflow_settings=custom)) == custom
    assert resolve_workflow(make_project()) is WORKFLOW_TRANSITIONS
    assert resolve_workflow(None) is WORKFLOW_TRANSITIONS
