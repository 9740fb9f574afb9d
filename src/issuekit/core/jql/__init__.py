"""JQL-lite: ``field = value AND field2 = value2`` filters."""

from issuekit.core.jql.evaluate import execute_jql, matches_clauses
from issuekit.core.jql.parse import JqlClause, parse_jql

__all__ = ["JqlClause", "execute_jql", "matches_clauses", "parse_jql"]
