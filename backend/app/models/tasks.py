"""Task model representing a card inside a board column."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from app.core.time import utcnow

RUNTIME_ANNOTATION_TYPES = (datetime,)


class Task(SQLModel, table=True):
    """Column-scoped task; `board_id` mirrors the owning column's board."""

    __tablename__ = "tasks"  # pyright: ignore[reportAssignmentType]
    __table_args__ = (
        UniqueConstraint("column_id", "position", name="uq_tasks_column_position"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    column_id: UUID = Field(foreign_key="columns.id", ondelete="CASCADE", index=True)
    board_id: UUID = Field(foreign_key="boards.id", ondelete="CASCADE", index=True)

    title: str
    description: str | None = None
    position: int

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime())
