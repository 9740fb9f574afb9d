"""Automation rule selection and condition evaluation."""

from __future__ import annotations

from issuekit.core.contracts.automation import AutomationLog, AutomationRule
from issuekit.core.contracts.issue import Issue
from issuekit.core.utils import js_string, lookup_field


def evaluate_automation_condition(condition: str, issue: Issue) -> bool:
    """Evaluate a ``field op value`` condition, ``op`` being ``=`` or ``!=``.

    Empty or malformed conditions (anything other than exactly three
    space-separated tokens, or an unknown operator) match every issue.
    """
    if not condition:
        return True
    parts = condition.split(" ")
    if len(parts) != 3:
        return True
    field, op, value = parts
    actual = js_string(lookup_field(issue.to_row(), field))
    if op == "=":
        return actual == value
    if op == "!=":
        return actual != value
    return True


def select_rules(rules: list[AutomationRule], trigger: str) -> list[AutomationRule]:
    """Enabled rules for *trigger*, in storage order."""
    return [rule for rule in rules if rule.enabled and rule.trigger == trigger]


def sort_automation_logs_by_executed_at(logs: list[AutomationLog]) -> list[AutomationLog]:
    return sorted(logs, key=lambda log: log.executed_at, reverse=True)
