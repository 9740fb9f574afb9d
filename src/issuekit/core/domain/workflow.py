"""Issue status state machine."""

from __future__ import annotations

from issuekit.core.constants.workflow import WORKFLOW_TRANSITIONS
from issuekit.core.contracts.project import Project, WorkflowTable


def resolve_workflow(project: Project | None) -> WorkflowTable:
    """The project's override table, or the default one."""
    if project is None or project.workflow_settings is None:
        return WORKFLOW_TRANSITIONS
    return project.workflow_settings


def allowed_transitions(workflow: WorkflowTable, current: str) -> list[str]:
    """Statuses reachable from *current*; a status missing from the table reaches nothing."""
    return list(workflow.get(current, []))


def is_transition_allowed(workflow: WorkflowTable, current: str, target: str) -> bool:
    if target == current:
        return True
    return target in allowed_transitions(workflow, current)
