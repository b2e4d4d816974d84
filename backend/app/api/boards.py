"""Board CRUD endpoints plus the board-scoped column and task listings."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, status

from app.api.deps import STORE_DEP
from app.core.errors import NotFoundError
from app.schemas.boards import (
    BoardCreate,
    BoardListResponse,
    BoardRead,
    BoardResponse,
    BoardUpdate,
)
from app.schemas.columns import ColumnListResponse, ColumnRead
from app.schemas.common import SuccessResponse
from app.schemas.tasks import TaskListResponse
from app.services import boards as board_service
from app.services import columns as column_service
from app.services import tasks as task_service
from app.services.validation import UNSET

if TYPE_CHECKING:
    from app.stores.base import EntityStore

router = APIRouter(prefix="/boards", tags=["boards"])


@router.get("", response_model=BoardListResponse)
async def list_boards(store: EntityStore = STORE_DEP) -> BoardListResponse:
    """List every board, oldest first."""
    boards = await board_service.list_boards(store)
    return BoardListResponse(boards=[BoardRead.model_validate(board) for board in boards])


@router.post("", response_model=BoardResponse, status_code=status.HTTP_201_CREATED)
async def create_board(
    payload: BoardCreate,
    store: EntityStore = STORE_DEP,
) -> BoardResponse:
    """Create a board with the default Todo, Doing and Done columns."""
    board = await board_service.create_board(store, name=payload.name)
    return BoardResponse(board=BoardRead.model_validate(board))


@router.get("/{board_id}", response_model=BoardResponse)
async def get_board(board_id: UUID, store: EntityStore = STORE_DEP) -> BoardResponse:
    board = await board_service.get_board(store, board_id)
    if board is None:
        raise NotFoundError("Board", board_id)
    return BoardResponse(board=BoardRead.model_validate(board))


@router.patch("/{board_id}", response_model=BoardResponse)
async def update_board(
    board_id: UUID,
    payload: BoardUpdate,
    store: EntityStore = STORE_DEP,
) -> BoardResponse:
    """Rename a board."""
    board = await board_service.update_board(
        store,
        board_id=board_id,
        name=payload.name if "name" in payload.model_fields_set else UNSET,
    )
    return BoardResponse(board=BoardRead.model_validate(board))


@router.delete("/{board_id}", response_model=SuccessResponse)
async def delete_board(board_id: UUID, store: EntityStore = STORE_DEP) -> SuccessResponse:
    """Delete a board and everything on it; the last board is protected."""
    await board_service.delete_board(store, board_id=board_id)
    return SuccessResponse()


@router.get("/{board_id}/columns", response_model=ColumnListResponse)
async def list_board_columns(
    board_id: UUID,
    store: EntityStore = STORE_DEP,
) -> ColumnListResponse:
    """List a board's columns in display order."""
    columns = await column_service.list_columns(store, board_id)
    return ColumnListResponse(columns=[ColumnRead.model_validate(column) for column in columns])


@router.get("/{board_id}/tasks", response_model=TaskListResponse)
async def list_board_tasks(
    board_id: UUID,
    store: EntityStore = STORE_DEP,
) -> TaskListResponse:
    """List a board's tasks column by column, each column in display order."""
    tasks = await task_service.list_board_tasks(store, board_id)
    return TaskListResponse(tasks=tasks)
