from __future__ import annotations

import pytest

from issuekit.core.contracts.automation import AutomationLog, AutomationTrigger
from issuekit.core.domain.automation import (
    evaluate_automation_condition,
    select_rules,
    sort_automation_logs_by_executed_at,
)
from tests.factories import make_issue, make_rule


@pytest.mark.parametrize(
    ("condition", "expected"),
    [
        ("priority = High", True),
        ("priority = Low", False),
        ("priority != Low", True),
        ("priority != High", False),
        ("", True),
        ("priority", True),
        ("priority is very High", True),
        ("priority > High", True),
    ],
)
def test_evaluate_condition(condition: str, expected: bool) -> None:
    issue = make_issue(priority="High")

    assert evaluate_automation_condition(condition, issue) is expected


def test_condition_compares_missing_and_null_fields_as_text() -> None:
    issue = make_issue(assignee_id=None)

    assert evaluate_automation_condition("assigneeId = null", issue)
    assert evaluate_automation_condition("snake_field = undefined", issue)


def test_condition_accepts_snake_case_field_names() -> None:
    assert evaluate_automation_condition("reporter_id = u1", make_issue())


def test_select_rules_skips_disabled_and_other_triggers() -> None:
    rules = [
        make_rule(id="a"),
        make_rule(id="b", enabled=False),
        make_rule(id="c", trigger=AutomationTrigger.COMMENT_ADDED),
        make_rule(id="d"),
    ]

    selected = select_rules(rules, AutomationTrigger.ISSUE_CREATED)

    assert [rule.id for rule in selected] == ["a", "d"]


def test_logs_sort_newest_first() -> None:
    logs = [
        AutomationLog(id="1", rule_id="r", status="success", message="", executed_at="2024-01-01T00:00:00.000Z"),
        AutomationLog(id="2", rule_id="r", status="failure", message="", executed_at="2024-03-01T00:00:00.000Z"),
        AutomationLog(id="3", rule_id="r", status="success", message="", executed_at="2024-02-01T00:00:00.000Z"),
    ]

    assert [log.id for log in sort_automation_logs_by_executed_at(logs)] == ["2", "3", "1"]
