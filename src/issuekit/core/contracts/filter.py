"""Saved filter and view history contracts."""

from __future__ import annotations

from issuekit.core.contracts.base import PatchModel, StorageModel


class SavedFilter(StorageModel):
    id: str
    name: str
    query: str
    owner_id: str
    is_favorite: bool = False
    is_jql_mode: bool = False


class SavedFilterPatch(PatchModel):
    name: str | None = None
    query: str | None = None
    is_favorite: bool | None = None
    is_jql_mode: bool | None = None


class ViewHistory(StorageModel):
    id: str
    """``{userId}-{issueId}``; re-viewing overwrites the same row."""
    user_id: str
    issue_id: str
    viewed_at: str

    @staticmethod
    def make_id(user_id: str, issue_id: str) -> str:
        return f"{user_id}-{issue_id}"
