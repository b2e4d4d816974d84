"""Board model: the top-level owner of columns and tasks."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from app.core.time import utcnow

RUNTIME_ANNOTATION_TYPES = (datetime,)


class Board(SQLModel, table=True):
    """Named Kanban board owning an ordered set of columns."""

    __tablename__ = "boards"  # pyright: ignore[reportAssignmentType]

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(), index=True)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime())
