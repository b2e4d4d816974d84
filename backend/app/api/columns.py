"""Column CRUD endpoints and the column-scoped task listing."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, status

from app.api.deps import STORE_DEP
from app.core.errors import NotFoundError
from app.models.columns import DEFAULT_COLUMN_COLOR
from app.schemas.columns import ColumnCreate, ColumnRead, ColumnResponse, ColumnUpdate
from app.schemas.common import SuccessResponse
from app.schemas.tasks import TaskListResponse
from app.services import columns as column_service
from app.services import tasks as task_service
from app.services.validation import UNSET

if TYPE_CHECKING:
    from app.stores.base import EntityStore

router = APIRouter(prefix="/columns", tags=["columns"])


@router.post("", response_model=ColumnResponse, status_code=status.HTTP_201_CREATED)
async def create_column(
    payload: ColumnCreate,
    store: EntityStore = STORE_DEP,
) -> ColumnResponse:
    """Append a column to a board, or insert it at `position`."""
    column = await column_service.create_column(
        store,
        board_id=payload.board_id,
        name=payload.name,
        color=payload.color or DEFAULT_COLUMN_COLOR,
        position=payload.position,
    )
    return ColumnResponse(column=ColumnRead.model_validate(column))


@router.get("/{column_id}", response_model=ColumnResponse)
async def get_column(column_id: UUID, store: EntityStore = STORE_DEP) -> ColumnResponse:
    column = await column_service.get_column(store, column_id)
    if column is None:
        raise NotFoundError("Column", column_id)
    return ColumnResponse(column=ColumnRead.model_validate(column))


@router.patch("/{column_id}", response_model=ColumnResponse)
async def update_column(
    column_id: UUID,
    payload: ColumnUpdate,
    store: EntityStore = STORE_DEP,
) -> ColumnResponse:
    """Rename, recolor or reorder a column."""
    fields = payload.model_fields_set
    column = await column_service.update_column(
        store,
        column_id=column_id,
        name=payload.name if "name" in fields else UNSET,
        color=payload.color if "color" in fields else UNSET,
        position=payload.position if "position" in fields else UNSET,
    )
    return ColumnResponse(column=ColumnRead.model_validate(column))


@router.delete("/{column_id}", response_model=SuccessResponse)
async def delete_column(column_id: UUID, store: EntityStore = STORE_DEP) -> SuccessResponse:
    """Delete a column with its tasks; a board's last column is protected."""
    await column_service.delete_column(store, column_id=column_id)
    return SuccessResponse()


@router.get("/{column_id}/tasks", response_model=TaskListResponse)
async def list_column_tasks(
    column_id: UUID,
    store: EntityStore = STORE_DEP,
) -> TaskListResponse:
    tasks = await task_service.list_tasks(store, column_id)
    return TaskListResponse(tasks=tasks)
