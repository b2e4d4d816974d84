# ruff: noqa: INP001
"""Board lifecycle tests, run against every store backend."""

from __future__ import annotations

from uuid import uuid4

import pytest

from app.core.errors import BusinessRuleError, NotFoundError, ValidationError
from app.models.boards import Board
from app.models.columns import DEFAULT_COLUMN_COLOR, BoardColumn
from app.models.subtasks import Subtask
from app.models.tasks import Task
from app.services import boards as board_service
from app.services.subtasks import create_subtask
from app.services.tasks import create_task


@pytest.mark.asyncio
async def test_create_board_seeds_default_columns(store) -> None:
    board = await board_service.create_board(store, name="  Launch  ")

    assert board.name == "Launch"
    columns = await store.list_by_parent(BoardColumn, board.id)
    assert [column.name for column in columns] == ["Todo", "Doing", "Done"]
    assert [column.position for column in columns] == [0, 1, 2]
    assert {column.color for column in columns} == {DEFAULT_COLUMN_COLOR}


@pytest.mark.asyncio
async def test_create_board_name_boundaries(store) -> None:
    board = await board_service.create_board(store, name="x" * 100)
    assert len(board.name) == 100

    with pytest.raises(ValidationError) as exc:
        await board_service.create_board(store, name="x" * 101)
    assert exc.value.field == "name"
    assert exc.value.message == "Board name must be 100 characters or less"

    with pytest.raises(ValidationError, match="Board name cannot be empty"):
        await board_service.create_board(store, name="   ")

    assert await store.count(Board) == 1


@pytest.mark.asyncio
async def test_list_boards_oldest_first(store) -> None:
    first = await board_service.create_board(store, name="First")
    second = await board_service.create_board(store, name="Second")

    boards = await board_service.list_boards(store)

    assert [board.id for board in boards] == [first.id, second.id]


@pytest.mark.asyncio
async def test_update_board_renames_and_stamps(store) -> None:
    board = await board_service.create_board(store, name="Old")

    updated = await board_service.update_board(store, board_id=board.id, name=" New ")

    assert updated.name == "New"
    assert updated.updated_at >= board.updated_at
    assert updated.created_at == board.created_at


@pytest.mark.asyncio
async def test_update_missing_board_is_not_found(store) -> None:
    missing = uuid4()
    with pytest.raises(NotFoundError) as exc:
        await board_service.update_board(store, board_id=missing, name="x")
    assert exc.value.message == f"Board with id {missing} not found"


@pytest.mark.asyncio
async def test_last_board_cannot_be_deleted(store) -> None:
    board = await board_service.create_board(store, name="Only")

    with pytest.raises(BusinessRuleError):
        await board_service.delete_board(store, board_id=board.id)

    assert await board_service.get_board(store, board.id) is not None


@pytest.mark.asyncio
async def test_delete_board_cascades_to_descendants(store) -> None:
    keep = await board_service.create_board(store, name="Keep")
    doomed = await board_service.create_board(store, name="Doomed")
    column = (await store.list_by_parent(BoardColumn, doomed.id))[0]
    task = await create_task(store, column_id=column.id, board_id=doomed.id, title="Ship it")
    await create_subtask(store, task_id=task.id, title="Write notes")

    await board_service.delete_board(store, board_id=doomed.id)

    assert await board_service.get_board(store, doomed.id) is None
    assert await store.list_by_parent(BoardColumn, doomed.id) == []
    assert await store.get(Task, task.id) is None
    assert await store.list_by_parent(Subtask, task.id) == []
    assert len(await store.list_by_parent(BoardColumn, keep.id)) == 3


@pytest.mark.asyncio
async def test_ensure_default_board_only_seeds_empty_store(store) -> None:
    seeded = await board_service.ensure_default_board(store)

    assert seeded is not None
    assert seeded.name == "My Board"
    assert await board_service.ensure_default_board(store) is None
    assert await store.count(Board) == 1
