"""Small helpers shared by the domain functions and the storage adapters."""

from __future__ import annotations

import base64
import math
import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()
"""Marker for a field absent from a row (distinct from an explicit ``None``)."""


def now_iso() -> str:
    """Current UTC time as a millisecond-precision ISO-8601 string ending in ``Z``."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def js_string(value: Any) -> str:
    """Render *value* the way the persisted format's string comparison expects.

    Missing values render as ``"undefined"``, ``None`` as ``"null"``, booleans
    lowercase, integral floats without a fractional part and lists
    comma-joined.
    """
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, list | tuple):
        return ",".join("" if item is None else js_string(item) for item in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def lookup_field(row: dict[str, Any], field: str) -> Any:
    """Read *field* from a serialized row, trying the name as given then its camelCase twin."""
    if field in row:
        return row[field]
    return row.get(snake_to_camel(field), MISSING)


def snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_data_uri(payload: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(payload).decode('ascii')}"
