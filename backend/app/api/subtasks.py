"""Subtask CRUD endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, status

from app.api.deps import STORE_DEP
from app.core.errors import NotFoundError
from app.schemas.common import SuccessResponse
from app.schemas.subtasks import SubtaskCreate, SubtaskRead, SubtaskResponse, SubtaskUpdate
from app.services import subtasks as subtask_service
from app.services.validation import UNSET

if TYPE_CHECKING:
    from app.stores.base import EntityStore

router = APIRouter(prefix="/subtasks", tags=["subtasks"])


@router.post("", response_model=SubtaskResponse, status_code=status.HTTP_201_CREATED)
async def create_subtask(
    payload: SubtaskCreate,
    store: EntityStore = STORE_DEP,
) -> SubtaskResponse:
    subtask = await subtask_service.create_subtask(
        store,
        task_id=payload.task_id,
        title=payload.title,
        position=payload.position,
    )
    return SubtaskResponse(subtask=SubtaskRead.model_validate(subtask))


@router.get("/{subtask_id}", response_model=SubtaskResponse)
async def get_subtask(subtask_id: UUID, store: EntityStore = STORE_DEP) -> SubtaskResponse:
    subtask = await subtask_service.get_subtask(store, subtask_id)
    if subtask is None:
        raise NotFoundError("Subtask", subtask_id)
    return SubtaskResponse(subtask=SubtaskRead.model_validate(subtask))


@router.patch("/{subtask_id}", response_model=SubtaskResponse)
async def update_subtask(
    subtask_id: UUID,
    payload: SubtaskUpdate,
    store: EntityStore = STORE_DEP,
) -> SubtaskResponse:
    """Edit, reorder or complete a subtask; `toggle: true` flips completion."""
    fields = payload.model_fields_set
    subtask = await subtask_service.update_subtask(
        store,
        subtask_id=subtask_id,
        title=payload.title if "title" in fields else UNSET,
        is_completed=payload.is_completed if payload.is_completed is not None else UNSET,
        position=payload.position if payload.position is not None else UNSET,
        toggle=payload.toggle,
    )
    return SubtaskResponse(subtask=SubtaskRead.model_validate(subtask))


@router.delete("/{subtask_id}", response_model=SuccessResponse)
async def delete_subtask(subtask_id: UUID, store: EntityStore = STORE_DEP) -> SuccessResponse:
    await subtask_service.delete_subtask(store, subtask_id=subtask_id)
    return SuccessResponse()
