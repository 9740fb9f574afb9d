"""Derived-view result contracts."""

from __future__ import annotations

from pydantic import BaseModel, Field


class WorkloadEntry(BaseModel):
    user_id: str
    user_name: str
    count: int


class EpicProgress(BaseModel):
    id: str
    title: str
    percent: int


class ProjectStats(BaseModel):
    workload: list[WorkloadEntry] = Field(default_factory=list)
    epic_progress: list[EpicProgress] = Field(default_factory=list)
