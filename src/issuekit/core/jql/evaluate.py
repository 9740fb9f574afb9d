"""Evaluate JQL-lite queries against in-memory issues."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TypeVar

from issuekit.core.contracts.issue import Issue
from issuekit.core.jql.parse import JqlClause, parse_jql
from issuekit.core.utils import js_string, lookup_field

logger = logging.getLogger(__name__)

IssueT = TypeVar("IssueT", bound=Issue)


def matches_clauses(issue: Issue, clauses: Sequence[JqlClause]) -> bool:
    row = issue.to_row()
    return all(js_string(lookup_field(row, clause.field)) == clause.value for clause in clauses)


def execute_jql(jql: str, issues: list[IssueT]) -> list[IssueT]:
    """Return the issues matching every clause of *jql*.

    A query with no usable clause, or one that cannot be parsed at all,
    returns *issues* unfiltered.
    """
    try:
        clauses = parse_jql(jql)
    except (TypeError, AttributeError) as exc:
        logger.debug("Unparseable JQL %r: %s", jql, exc)
        return issues
    if not clauses:
        return issues
    return [issue for issue in issues if matches_clauses(issue, clauses)]
