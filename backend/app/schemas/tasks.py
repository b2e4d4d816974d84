"""Schemas for task CRUD and cross-column move operations."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.schemas.common import ApiModel

RUNTIME_ANNOTATION_TYPES = (datetime, UUID)


class TaskCreate(ApiModel):
    """Payload for creating a task inside a column of ``board_id``."""

    column_id: UUID
    board_id: UUID
    title: str
    description: str | None = None
    position: int | None = None


class TaskUpdate(ApiModel):
    """Partial task update; a different ``column_id`` appends the task there."""

    title: str | None = None
    description: str | None = None
    column_id: UUID | None = None


class TaskMove(ApiModel):
    """Drag-and-drop move request."""

    task_id: UUID
    target_column_id: UUID
    new_position: int = Field(
        description="Zero-based slot in the target column; values past the end append.",
        examples=[0],
    )


class TaskRead(ApiModel):
    """Task payload with the status derived from its column name."""

    id: UUID
    column_id: UUID
    board_id: UUID
    title: str
    description: str | None = None
    position: int
    status: str | None = Field(
        default=None,
        description="`todo`, `doing` or `done` when the column carries that name.",
    )
    created_at: datetime
    updated_at: datetime


class TaskResponse(ApiModel):
    task: TaskRead


class TaskListResponse(ApiModel):
    tasks: list[TaskRead]
