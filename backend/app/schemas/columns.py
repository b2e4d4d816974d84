"""Schemas for board column API operations."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from app.schemas.common import ApiModel

RUNTIME_ANNOTATION_TYPES = (datetime, UUID)


class ColumnCreate(ApiModel):
    """Payload for creating a column; omitted ``position`` appends it."""

    board_id: UUID
    name: str
    color: str | None = None
    position: int | None = None


class ColumnUpdate(ApiModel):
    """Partial column update; ``position`` reorders within the board."""

    name: str | None = None
    color: str | None = None
    position: int | None = None


class ColumnRead(ApiModel):
    id: UUID
    board_id: UUID
    name: str
    color: str
    position: int
    created_at: datetime
    updated_at: datetime


class ColumnResponse(ApiModel):
    column: ColumnRead


class ColumnListResponse(ApiModel):
    columns: list[ColumnRead]
