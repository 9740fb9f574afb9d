"""User contracts."""

from __future__ import annotations

from pydantic import BaseModel

from issuekit.core.contracts.base import PatchModel, StorageModel


class User(StorageModel):
    id: str
    name: str
    avatar_url: str = ""
    email: str | None = None


class UserPatch(PatchModel):
    name: str | None = None
    avatar_url: str | None = None
    email: str | None = None


class UserStats(BaseModel):
    assigned: int = 0
    reported: int = 0
    leading: int = 0
