"""Storage configuration contract."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

BackendName = Literal["web", "mobile"]


class StorageConfig(BaseModel):
    """Top-level configuration for an :class:`~issuekit.core.contracts.storage.AppStorage`.

    Attributes:
        backend: ``"web"`` (multi-table local store with live queries) or
            ``"mobile"`` (SQLite, one JSON blob per row).
        path: Database file. ``None`` keeps everything in memory.
        settings_path: Key-value settings file. ``None`` keeps settings in memory.
        issue_key_offset: Added to the per-project issue count when numbering keys.
        recent_issue_limit: Default size of the "recently viewed" list.
        default_user_id: Acting user when no ``currentUserId`` setting exists.
    """

    backend: BackendName = "web"
    path: Path | None = None
    settings_path: Path | None = None
    issue_key_offset: int = Field(default=101, ge=0)
    recent_issue_limit: int = Field(default=10, ge=1)
    default_user_id: str = "u1"

    model_config = {"extra": "forbid"}
