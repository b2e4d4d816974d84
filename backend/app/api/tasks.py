"""Task CRUD endpoints, the drag-and-drop move, and task subtask listing."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, status

from app.api.deps import STORE_DEP
from app.core.errors import NotFoundError
from app.schemas.common import SuccessResponse
from app.schemas.subtasks import SubtaskListResponse, SubtaskRead
from app.schemas.tasks import TaskCreate, TaskMove, TaskResponse, TaskUpdate
from app.services import subtasks as subtask_service
from app.services import tasks as task_service
from app.services.validation import UNSET

if TYPE_CHECKING:
    from app.stores.base import EntityStore

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(payload: TaskCreate, store: EntityStore = STORE_DEP) -> TaskResponse:
    """Create a task in a column of the given board."""
    task = await task_service.create_task(
        store,
        column_id=payload.column_id,
        board_id=payload.board_id,
        title=payload.title,
        description=payload.description,
        position=payload.position,
    )
    return TaskResponse(task=task)


# Declared before `/{task_id}` so `move` is never parsed as an id.
@router.post("/move", response_model=TaskResponse)
async def move_task(payload: TaskMove, store: EntityStore = STORE_DEP) -> TaskResponse:
    """Move a task to a position in the same or another column."""
    task = await task_service.move_task(
        store,
        task_id=payload.task_id,
        target_column_id=payload.target_column_id,
        new_position=payload.new_position,
    )
    return TaskResponse(task=task)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: UUID, store: EntityStore = STORE_DEP) -> TaskResponse:
    task = await task_service.get_task(store, task_id)
    if task is None:
        raise NotFoundError("Task", task_id)
    return TaskResponse(task=task)


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: UUID,
    payload: TaskUpdate,
    store: EntityStore = STORE_DEP,
) -> TaskResponse:
    """Edit a task; a new `columnId` appends it to that column."""
    fields = payload.model_fields_set
    task = await task_service.update_task(
        store,
        task_id=task_id,
        title=payload.title if "title" in fields else UNSET,
        description=payload.description if "description" in fields else UNSET,
        column_id=payload.column_id if payload.column_id is not None else UNSET,
    )
    return TaskResponse(task=task)


@router.delete("/{task_id}", response_model=SuccessResponse)
async def delete_task(task_id: UUID, store: EntityStore = STORE_DEP) -> SuccessResponse:
    await task_service.delete_task(store, task_id=task_id)
    return SuccessResponse()


@router.get("/{task_id}/subtasks", response_model=SubtaskListResponse)
async def list_task_subtasks(
    task_id: UUID,
    store: EntityStore = STORE_DEP,
) -> SubtaskListResponse:
    """List a task's subtasks in checklist order."""
    subtasks = await subtask_service.list_subtasks(store, task_id)
    return SubtaskListResponse(
        subtasks=[SubtaskRead.model_validate(subtask) for subtask in subtasks],
    )
