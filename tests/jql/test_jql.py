from __future__ import annotations

import pytest

from issuekit.core.jql import JqlClause, execute_jql, parse_jql
from tests.factories import make_issue

ISSUES = [
    make_issue(id="i-1", key="DEV-1", status="Done", priority="Highest"),
    make_issue(id="i-2", key="DEV-2", status="Done", priority="Low"),
    make_issue(id="i-3", key="DEV-3", status="To Do", priority="Highest", assignee_id="u2"),
]


def test_parse_splits_on_case_insensitive_and() -> None:
    assert parse_jql("status = Done and priority = 'Highest'") == [
        JqlClause(field="status", value="Done"),
        JqlClause(field="priority", value="Highest"),
    ]


def test_parse_drops_parts_that_are_not_clauses() -> None:
    assert parse_jql("garbage AND status = Done") == [JqlClause(field="status", value="Done")]


def test_parse_keeps_multi_word_quoted_values() -> None:
    assert parse_jql('status = "In Progress"') == [JqlClause(field="status", value="In Progress")]


def test_conjunction_requires_every_clause() -> None:
    matched = execute_jql("status = Done AND priority = Highest", ISSUES)

    assert [issue.key for issue in matched] == ["DEV-1"]


def test_invalid_query_returns_everything() -> None:
    assert execute_jql("this is not jql", ISSUES) == ISSUES
    assert execute_jql("", ISSUES) == ISSUES


def test_parse_rejects_non_string_query() -> None:
    with pytest.raises(TypeError):
        parse_jql(None)  # type: ignore[arg-type]

    assert execute_jql(None, ISSUES) == ISSUES  # type: ignore[arg-type]


def test_unknown_field_matches_undefined() -> None:
    assert execute_jql("nope = Done", ISSUES) == []
    assert len(execute_jql("nope = undefined", ISSUES)) == 3


def test_null_field_matches_null_literal() -> None:
    matched = execute_jql("assigneeId = null", ISSUES)

    assert [issue.key for issue in matched] == ["DEV-1", "DEV-2"]
