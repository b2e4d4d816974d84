"""Board column model; columns are ordered by a dense per-board position."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel

from app.core.time import utcnow

RUNTIME_ANNOTATION_TYPES = (datetime,)
DEFAULT_COLUMN_COLOR = "#635FC7"


class BoardColumn(SQLModel, table=True):
    """Ordered column within a board."""

    __tablename__ = "columns"  # pyright: ignore[reportAssignmentType]
    __table_args__ = (
        UniqueConstraint("board_id", "position", name="uq_columns_board_position"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    board_id: UUID = Field(foreign_key="boards.id", ondelete="CASCADE", index=True)
    name: str
    color: str = Field(default=DEFAULT_COLUMN_COLOR)
    position: int
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime())
