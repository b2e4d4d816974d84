"""Schemas for board create/update/read API operations."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from app.schemas.common import ApiModel

RUNTIME_ANNOTATION_TYPES = (datetime, UUID)


class BoardCreate(ApiModel):
    """Payload for creating a board."""

    name: str


class BoardUpdate(ApiModel):
    """Payload for partial board updates."""

    name: str | None = None


class BoardRead(ApiModel):
    """Board payload returned from read endpoints."""

    id: UUID
    name: str
    created_at: datetime
    updated_at: datetime


class BoardResponse(ApiModel):
    board: BoardRead


class BoardListResponse(ApiModel):
    boards: list[BoardRead]
