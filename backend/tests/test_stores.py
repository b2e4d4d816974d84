# ruff: noqa: INP001
"""Entity store contract tests: constraints, transactions and JSON persistence."""

from __future__ import annotations

import json
from datetime import datetime

import pytest
from sqlalchemy import DateTime

from app.core.errors import NotFoundError, StorageError
from app.models.boards import Board
from app.models.columns import BoardColumn
from app.models.subtasks import Subtask
from app.models.tasks import Task
from app.models.theme_preferences import ThemePreference
from app.services.boards import create_board
from app.services.columns import list_columns
from app.stores.base import cascade_children, parent_field
from app.stores.json_file import JsonFileEntityStore


def test_parent_field_rejects_unpositioned_models() -> None:
    assert parent_field(BoardColumn) == "board_id"
    with pytest.raises(TypeError, match="not a positioned entity"):
        parent_field(Board)


def test_cascade_children_of_board() -> None:
    children = {(child.__name__, field) for child, field in cascade_children(Board)}
    assert children == {("BoardColumn", "board_id"), ("Task", "board_id")}


@pytest.mark.parametrize("model", [Board, BoardColumn, Task, Subtask, ThemePreference])
def test_timestamp_columns_are_naive(model) -> None:
    for name in ("created_at", "updated_at"):
        if name not in model.__table__.c:
            continue
        column_type = model.__table__.c[name].type
        assert isinstance(column_type, DateTime)
        assert column_type.timezone is False


@pytest.mark.asyncio
async def test_naive_utc_timestamps_round_trip(store) -> None:
    stamp = datetime(2024, 5, 1, 12, 30)
    board = await store.insert(Board(name="Stamped", created_at=stamp, updated_at=stamp))

    reloaded = await store.get(Board, board.id)

    assert reloaded is not None
    assert reloaded.created_at == stamp
    assert reloaded.created_at.tzinfo is None


@pytest.mark.asyncio
async def test_duplicate_parent_position_is_rejected(store) -> None:
    board = await create_board(store, name="Board")

    with pytest.raises(StorageError):
        async with store.transaction():
            await store.insert(BoardColumn(board_id=board.id, name="Dup", position=0))

    assert [column.name for column in await list_columns(store, board.id)] == [
        "Todo",
        "Doing",
        "Done",
    ]


@pytest.mark.asyncio
async def test_transaction_discards_writes_on_domain_error(store) -> None:
    board = await create_board(store, name="Board")

    with pytest.raises(NotFoundError):
        async with store.transaction():
            await store.update(Board, board.id, {"name": "Changed"})
            raise NotFoundError("Column", "missing")

    reloaded = await store.get(Board, board.id)
    assert reloaded is not None
    assert reloaded.name == "Board"


@pytest.mark.asyncio
async def test_unclassified_failures_surface_as_storage_errors(store) -> None:
    msg = "disk on fire"
    with pytest.raises(StorageError) as exc:
        async with store.transaction():
            raise RuntimeError(msg)

    assert isinstance(exc.value.cause, RuntimeError)


@pytest.mark.asyncio
async def test_nested_transactions_commit_once(store) -> None:
    async with store.transaction():
        async with store.transaction():
            await store.insert(Board(name="Inner", created_at=datetime(2024, 1, 1)))
        await store.insert(Board(name="Outer", created_at=datetime(2024, 1, 2)))

    assert [board.name for board in await store.list_all(Board)] == ["Inner", "Outer"]


@pytest.mark.asyncio
async def test_json_store_persists_across_instances(tmp_path) -> None:
    path = tmp_path / "nested" / "kanban.json"
    board = await create_board(JsonFileEntityStore(path), name="Persisted")

    reopened = JsonFileEntityStore(path)
    columns = await list_columns(reopened, board.id)

    assert [column.name for column in columns] == ["Todo", "Doing", "Done"]
    document = json.loads(path.read_text(encoding="utf-8"))
    assert document["boards"][0]["name"] == "Persisted"
    assert set(document) == {"boards", "columns", "tasks", "subtasks", "theme_preferences"}


@pytest.mark.asyncio
async def test_json_store_leaves_file_untouched_after_rollback(tmp_path) -> None:
    path = tmp_path / "kanban.json"
    store = JsonFileEntityStore(path)
    await create_board(store, name="Stable")
    before = path.read_text(encoding="utf-8")

    with pytest.raises(StorageError):
        async with store.transaction():
            await store.insert(Board(name="Ghost"))
            raise RuntimeError("abort")

    assert path.read_text(encoding="utf-8") == before
    assert [board.name for board in await store.list_all(Board)] == ["Stable"]


@pytest.mark.asyncio
async def test_json_store_rejects_missing_foreign_key(tmp_path) -> None:
    store = JsonFileEntityStore(tmp_path / "kanban.json")
    orphan = BoardColumn(board_id=Board().id, name="Orphan", position=0)

    with pytest.raises(StorageError, match="FOREIGN KEY"):
        await store.insert(orphan)


@pytest.mark.asyncio
async def test_json_store_rejects_malformed_document(tmp_path) -> None:
    path = tmp_path / "kanban.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(StorageError, match="expected an object"):
        await JsonFileEntityStore(path).count(Board)
