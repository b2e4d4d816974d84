"""Schemas for subtask checklist operations."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.schemas.common import ApiModel

RUNTIME_ANNOTATION_TYPES = (datetime, UUID)


class SubtaskCreate(ApiModel):
    task_id: UUID
    title: str
    position: int | None = None


class SubtaskUpdate(ApiModel):
    """Partial subtask update.

    ``toggle`` flips completion and wins over an explicit ``is_completed``.
    """

    title: str | None = None
    is_completed: bool | None = None
    position: int | None = None
    toggle: bool = Field(default=False)


class SubtaskRead(ApiModel):
    id: UUID
    task_id: UUID
    title: str
    is_completed: bool
    position: int
    created_at: datetime
    updated_at: datetime


class SubtaskResponse(ApiModel):
    subtask: SubtaskRead


class SubtaskListResponse(ApiModel):
    subtasks: list[SubtaskRead]
