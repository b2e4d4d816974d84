# ruff: noqa: INP001
"""Task CRUD and move tests, run against every store backend."""

from __future__ import annotations

from uuid import uuid4

import pytest

from app.core.errors import NotFoundError, ValidationError
from app.models.subtasks import Subtask
from app.models.tasks import Task
from app.services import tasks as task_service
from app.services.boards import create_board
from app.services.columns import create_column, list_columns, update_column
from app.services.positions import is_dense
from app.services.subtasks import create_subtask


async def _board_with_columns(store):
    board = await create_board(store, name="Board")
    todo, doing, done = await list_columns(store, board.id)
    return board, todo, doing, done


async def _titles(store, column_id) -> list[tuple[str, int]]:
    return [(task.title, task.position) for task in await task_service.list_tasks(store, column_id)]


async def _seed(store, board, column, *titles: str) -> dict[str, object]:
    created = {}
    for title in titles:
        task = await task_service.create_task(
            store,
            column_id=column.id,
            board_id=board.id,
            title=title,
        )
        created[title] = task.id
    return created


def test_derive_status_uses_reserved_column_names() -> None:
    assert task_service.derive_status("Todo") == "todo"
    assert task_service.derive_status("  DOING ") == "doing"
    assert task_service.derive_status("done") == "done"
    assert task_service.derive_status("Review") is None


@pytest.mark.asyncio
async def test_create_tasks_append_in_creation_order(store) -> None:
    board, todo, _doing, _done = await _board_with_columns(store)

    await _seed(store, board, todo, "a", "b", "c")

    assert await _titles(store, todo.id) == [("a", 0), ("b", 1), ("c", 2)]


@pytest.mark.asyncio
async def test_create_task_reports_status_and_cleans_fields(store) -> None:
    board, todo, _doing, _done = await _board_with_columns(store)

    task = await task_service.create_task(
        store,
        column_id=todo.id,
        board_id=board.id,
        title="  Write docs ",
        description="   ",
    )

    assert task.title == "Write docs"
    assert task.description is None
    assert task.status == "todo"
    assert task.board_id == board.id


@pytest.mark.asyncio
async def test_create_task_at_position_inserts(store) -> None:
    board, todo, _doing, _done = await _board_with_columns(store)
    await _seed(store, board, todo, "a", "b")

    task = await task_service.create_task(
        store,
        column_id=todo.id,
        board_id=board.id,
        title="first",
        position=0,
    )

    assert task.position == 0
    assert await _titles(store, todo.id) == [("first", 0), ("a", 1), ("b", 2)]


@pytest.mark.asyncio
async def test_create_task_requires_column_on_the_given_board(store) -> None:
    board, todo, _doing, _done = await _board_with_columns(store)
    other = await create_board(store, name="Other")

    with pytest.raises(NotFoundError, match="Column with id"):
        await task_service.create_task(store, column_id=todo.id, board_id=other.id, title="x")
    with pytest.raises(NotFoundError):
        await task_service.create_task(store, column_id=uuid4(), board_id=board.id, title="x")


@pytest.mark.asyncio
async def test_task_field_boundaries(store) -> None:
    board, todo, _doing, _done = await _board_with_columns(store)

    await task_service.create_task(
        store,
        column_id=todo.id,
        board_id=board.id,
        title="t" * 200,
        description="d" * 5000,
    )
    with pytest.raises(ValidationError) as exc:
        await task_service.create_task(
            store,
            column_id=todo.id,
            board_id=board.id,
            title="t" * 201,
        )
    assert exc.value.field == "title"
    with pytest.raises(ValidationError) as exc:
        await task_service.create_task(
            store,
            column_id=todo.id,
            board_id=board.id,
            title="ok",
            description="d" * 5001,
        )
    assert exc.value.field == "description"


@pytest.mark.asyncio
async def test_same_column_moves(store) -> None:
    board, todo, _doing, _done = await _board_with_columns(store)
    ids = await _seed(store, board, todo, "A", "B", "C", "D", "E")

    await task_service.move_task(
        store,
        task_id=ids["B"],
        target_column_id=todo.id,
        new_position=3,
    )
    assert await _titles(store, todo.id) == [("A", 0), ("C", 1), ("D", 2), ("B", 3), ("E", 4)]

    await task_service.move_task(
        store,
        task_id=ids["D"],
        target_column_id=todo.id,
        new_position=0,
    )
    assert await _titles(store, todo.id) == [("D", 0), ("A", 1), ("C", 2), ("B", 3), ("E", 4)]


@pytest.mark.asyncio
async def test_cross_column_move(store) -> None:
    board, todo, doing, _done = await _board_with_columns(store)
    ids = await _seed(store, board, todo, "T1", "T2")
    await _seed(store, board, doing, "T3")

    moved = await task_service.move_task(
        store,
        task_id=ids["T1"],
        target_column_id=doing.id,
        new_position=0,
    )

    assert moved.column_id == doing.id
    assert moved.position == 0
    assert moved.status == "doing"
    assert await _titles(store, todo.id) == [("T2", 0)]
    assert await _titles(store, doing.id) == [("T1", 0), ("T3", 1)]


@pytest.mark.asyncio
async def test_move_past_end_appends(store) -> None:
    board, todo, doing, _done = await _board_with_columns(store)
    ids = await _seed(store, board, todo, "T1", "T2")
    await _seed(store, board, doing, "T3")

    moved = await task_service.move_task(
        store,
        task_id=ids["T1"],
        target_column_id=doing.id,
        new_position=99,
    )

    assert moved.position == 1
    assert await _titles(store, doing.id) == [("T3", 0), ("T1", 1)]


@pytest.mark.asyncio
async def test_move_to_another_board_updates_board_id(store) -> None:
    board, todo, _doing, _done = await _board_with_columns(store)
    other = await create_board(store, name="Other")
    other_todo = (await list_columns(store, other.id))[0]
    ids = await _seed(store, board, todo, "T1")

    moved = await task_service.move_task(
        store,
        task_id=ids["T1"],
        target_column_id=other_todo.id,
        new_position=0,
    )

    assert moved.board_id == other.id
    assert [task.id for task in await task_service.list_board_tasks(store, other.id)] == [
        ids["T1"],
    ]
    assert await task_service.list_board_tasks(store, board.id) == []


@pytest.mark.asyncio
async def test_move_rejects_negative_and_unknown_targets(store) -> None:
    board, todo, _doing, _done = await _board_with_columns(store)
    ids = await _seed(store, board, todo, "T1", "T2")

    with pytest.raises(ValidationError) as exc:
        await task_service.move_task(
            store,
            task_id=ids["T1"],
            target_column_id=todo.id,
            new_position=-1,
        )
    assert exc.value.field == "new_position"
    with pytest.raises(NotFoundError, match="Column"):
        await task_service.move_task(
            store,
            task_id=ids["T1"],
            target_column_id=uuid4(),
            new_position=0,
        )
    with pytest.raises(NotFoundError, match="Task"):
        await task_service.move_task(
            store,
            task_id=uuid4(),
            target_column_id=todo.id,
            new_position=0,
        )
    assert await _titles(store, todo.id) == [("T1", 0), ("T2", 1)]


@pytest.mark.asyncio
async def test_update_task_with_new_column_appends_there(store) -> None:
    board, todo, _doing, done = await _board_with_columns(store)
    ids = await _seed(store, board, todo, "T1", "T2")
    await _seed(store, board, done, "D1")

    updated = await task_service.update_task(
        store,
        task_id=ids["T1"],
        title="Renamed",
        column_id=done.id,
    )

    assert updated.title == "Renamed"
    assert updated.column_id == done.id
    assert updated.status == "done"
    assert await _titles(store, todo.id) == [("T2", 0)]
    assert await _titles(store, done.id) == [("D1", 0), ("Renamed", 1)]


@pytest.mark.asyncio
async def test_update_task_fields_only_keeps_position(store) -> None:
    board, todo, _doing, _done = await _board_with_columns(store)
    ids = await _seed(store, board, todo, "T1", "T2")

    updated = await task_service.update_task(store, task_id=ids["T2"], description="notes")

    assert updated.description == "notes"
    assert updated.position == 1
    assert updated.title == "T2"


@pytest.mark.asyncio
async def test_status_follows_column_rename(store) -> None:
    board, todo, _doing, _done = await _board_with_columns(store)
    ids = await _seed(store, board, todo, "T1")

    await update_column(store, column_id=todo.id, name="Backlog")

    task = await task_service.get_task(store, ids["T1"])
    assert task is not None
    assert task.status is None


@pytest.mark.asyncio
async def test_delete_task_closes_gap_and_removes_subtasks(store) -> None:
    board, todo, _doing, _done = await _board_with_columns(store)
    ids = await _seed(store, board, todo, "a", "b", "c", "d")
    await create_subtask(store, task_id=ids["b"], title="step")

    await task_service.delete_task(store, task_id=ids["b"])

    assert await _titles(store, todo.id) == [("a", 0), ("c", 1), ("d", 2)]
    assert await store.get(Task, ids["b"]) is None
    assert await store.list_by_parent(Subtask, ids["b"]) == []


@pytest.mark.asyncio
async def test_list_board_tasks_orders_by_column_then_position(store) -> None:
    board, todo, doing, _done = await _board_with_columns(store)
    await _seed(store, board, doing, "d1", "d2")
    await _seed(store, board, todo, "t1")
    extra = await create_column(store, board_id=board.id, name="Later", position=0)
    await _seed(store, board, extra, "l1")

    tasks = await task_service.list_board_tasks(store, board.id)

    assert [task.title for task in tasks] == ["l1", "t1", "d1", "d2"]
    assert [task.status for task in tasks] == [None, "todo", "doing", "doing"]


@pytest.mark.asyncio
async def test_mixed_operations_keep_columns_dense(store) -> None:
    board, todo, doing, done = await _board_with_columns(store)
    columns = [todo, doing, done]
    ids = list((await _seed(store, board, todo, *[f"t{i}" for i in range(6)])).values())

    plan = [
        (0, 1, 0),
        (1, 2, 5),
        (2, 1, 1),
        (3, 0, 0),
        (4, 2, 0),
        (0, 0, 3),
    ]
    for task_index, column_index, position in plan:
        await task_service.move_task(
            store,
            task_id=ids[task_index],
            target_column_id=columns[column_index].id,
            new_position=position,
        )
        for column in columns:
            tasks = await task_service.list_tasks(store, column.id)
            assert is_dense(task.position for task in tasks)

    await task_service.delete_task(store, task_id=ids[5])
    total = 0
    for column in columns:
        tasks = await task_service.list_tasks(store, column.id)
        assert is_dense(task.position for task in tasks)
        total += len(tasks)
    assert total == 5
