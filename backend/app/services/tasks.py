"""Task CRUD plus the drag-and-drop move across columns.

Moving a task between columns is the only operation that touches two ordered
lists at once: the source column closes its gap and the target column opens a
slot, all inside one store transaction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.core.errors import NotFoundError
from app.core.logging import get_logger
from app.core.time import utcnow
from app.models.columns import BoardColumn
from app.models.tasks import Task
from app.schemas.tasks import TaskRead
from app.services.boards import require_board
from app.services.columns import require_column
from app.services.positions import (
    append_position,
    apply_writes,
    plan_delete,
    plan_insert,
    plan_move,
    plan_transfer,
    require_valid_position,
)
from app.services.validation import (
    UNSET,
    validate_task_description,
    validate_task_title,
)

if TYPE_CHECKING:
    from uuid import UUID

    from app.stores.base import EntityStore

logger = get_logger(__name__)

# Column names that double as a task status, compared case-insensitively.
STATUS_COLUMN_NAMES = frozenset({"todo", "doing", "done"})


def derive_status(column_name: str) -> str | None:
    """Return the workflow status implied by a column name, if any."""
    status = column_name.strip().lower()
    return status if status in STATUS_COLUMN_NAMES else None


def to_task_read(task: Task, column: BoardColumn) -> TaskRead:
    return TaskRead.model_validate(
        {**task.model_dump(), "status": derive_status(column.name)},
    )


async def _require_task_row(store: EntityStore, task_id: UUID) -> Task:
    task = await store.get(Task, task_id)
    if task is None:
        raise NotFoundError("Task", task_id)
    return task


async def require_task(store: EntityStore, task_id: UUID) -> TaskRead:
    task = await _require_task_row(store, task_id)
    column = await require_column(store, task.column_id)
    return to_task_read(task, column)


async def create_task(
    store: EntityStore,
    *,
    column_id: UUID,
    board_id: UUID,
    title: str,
    description: str | None = None,
    position: int | None = None,
) -> TaskRead:
    """Create a task in ``column_id``, which must belong to ``board_id``."""
    clean_title = validate_task_title(title)
    clean_description = validate_task_description(description)
    if position is not None:
        require_valid_position(position)
    async with store.transaction():
        column = await store.get(BoardColumn, column_id)
        if column is None or column.board_id != board_id:
            raise NotFoundError("Column", column_id)
        siblings = await store.list_by_parent(Task, column_id)
        if position is None:
            position = append_position(siblings)
        else:
            await apply_writes(store, Task, plan_insert(siblings, position))
        now = utcnow()
        task = await store.insert(
            Task(
                column_id=column_id,
                board_id=column.board_id,
                title=clean_title,
                description=clean_description,
                position=position,
                created_at=now,
                updated_at=now,
            ),
        )
        task_id = task.id
    logger.info(
        "task.created",
        extra={"task_id": str(task_id), "column_id": str(column_id), "position": position},
    )
    return await require_task(store, task_id)


async def get_task(store: EntityStore, task_id: UUID) -> TaskRead | None:
    task = await store.get(Task, task_id)
    if task is None:
        return None
    column = await require_column(store, task.column_id)
    return to_task_read(task, column)


async def list_tasks(store: EntityStore, column_id: UUID) -> list[TaskRead]:
    """Return the tasks of one column in display order."""
    column = await require_column(store, column_id)
    tasks = await store.list_by_parent(Task, column_id)
    return [to_task_read(task, column) for task in tasks]


async def list_board_tasks(store: EntityStore, board_id: UUID) -> list[TaskRead]:
    """Return every task on a board, column by column, each in display order."""
    await require_board(store, board_id)
    result: list[TaskRead] = []
    for column in await store.list_by_parent(BoardColumn, board_id):
        tasks = await store.list_by_parent(Task, column.id)
        result.extend(to_task_read(task, column) for task in tasks)
    return result


async def _relocate(
    store: EntityStore,
    task: Task,
    target_column: BoardColumn,
    new_position: int | None,
) -> None:
    """Place ``task`` at ``new_position`` of ``target_column``; ``None`` appends."""
    if task.column_id == target_column.id:
        siblings = await store.list_by_parent(Task, task.column_id)
        position = len(siblings) - 1 if new_position is None else new_position
        await apply_writes(store, Task, plan_move(siblings, task.id, position))
        return
    source = await store.list_by_parent(Task, task.column_id)
    target = await store.list_by_parent(Task, target_column.id)
    position = append_position(target) if new_position is None else new_position
    writes = plan_transfer(
        source,
        target,
        task.id,
        position,
        target_parent_id=target_column.id,
    )
    await apply_writes(
        store,
        Task,
        writes,
        moved_values={"board_id": target_column.board_id},
    )


async def update_task(
    store: EntityStore,
    *,
    task_id: UUID,
    title: str | object = UNSET,
    description: str | None | object = UNSET,
    column_id: UUID | object = UNSET,
) -> TaskRead:
    """Edit task fields; a different ``column_id`` moves it to the end of that column."""
    values: dict[str, object] = {}
    if title is not UNSET:
        values["title"] = validate_task_title(title)
    if description is not UNSET:
        values["description"] = validate_task_description(description)
    async with store.transaction():
        task = await _require_task_row(store, task_id)
        if values:
            await store.update(Task, task_id, {**values, "updated_at": utcnow()})
        if column_id is not UNSET and column_id != task.column_id:
            target_column = await require_column(store, column_id)  # type: ignore[arg-type]
            await _relocate(store, task, target_column, None)
    logger.info("task.updated", extra={"task_id": str(task_id)})
    return await require_task(store, task_id)


async def move_task(
    store: EntityStore,
    *,
    task_id: UUID,
    target_column_id: UUID,
    new_position: int,
) -> TaskRead:
    """Move a task to ``new_position`` of ``target_column_id``.

    Within the same column the position is clamped to the last slot; across
    columns it is clamped to append. Both columns stay densely ordered.
    """
    require_valid_position(new_position, field="new_position")
    async with store.transaction():
        task = await _require_task_row(store, task_id)
        source_column_id = task.column_id
        target_column = await require_column(store, target_column_id)
        await _relocate(store, task, target_column, new_position)
    moved = await require_task(store, task_id)
    logger.info(
        "task.moved",
        extra={
            "task_id": str(task_id),
            "from_column_id": str(source_column_id),
            "to_column_id": str(target_column_id),
            "position": moved.position,
        },
    )
    return moved


async def delete_task(store: EntityStore, *, task_id: UUID) -> None:
    """Delete a task with its subtasks and close the gap in its column."""
    async with store.transaction():
        task = await _require_task_row(store, task_id)
        siblings = await store.list_by_parent(Task, task.column_id)
        await store.delete(Task, task_id)
        await apply_writes(store, Task, plan_delete(siblings, task_id))
    logger.info("task.deleted", extra={"task_id": str(task_id)})
