"""Parser for the JQL-lite filter language.

Grammar::

    query  := clause (" AND " clause)*      # separator is case-insensitive
    clause := identifier "=" value          # value optionally quoted

Only conjunctions of equality clauses exist. A part that does not look like a
clause is dropped rather than reported.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_SEPARATOR = re.compile(r" AND ", re.IGNORECASE)
_CLAUSE = re.compile(r"(\w+)\s*=\s*['\"]?([^'\"]+)['\"]?", re.ASCII)


@dataclass(frozen=True)
class JqlClause:
    field: str
    value: str


def parse_jql(jql: str) -> list[JqlClause]:
    clauses: list[JqlClause] = []
    for part in _SEPARATOR.split(jql):
        match = _CLAUSE.search(part)
        if match is None:
            continue
        field, value = match.groups()
        clauses.append(JqlClause(field=field, value=value))
    return clauses
