"""Subtask checklist operations within a task."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.core.errors import NotFoundError
from app.core.logging import get_logger
from app.core.time import utcnow
from app.models.subtasks import Subtask
from app.models.tasks import Task
from app.services.positions import (
    append_position,
    apply_writes,
    plan_delete,
    plan_insert,
    plan_move,
    require_valid_position,
)
from app.services.validation import UNSET, validate_subtask_title

if TYPE_CHECKING:
    from uuid import UUID

    from app.stores.base import EntityStore

logger = get_logger(__name__)


async def require_subtask(store: EntityStore, subtask_id: UUID) -> Subtask:
    subtask = await store.get(Subtask, subtask_id)
    if subtask is None:
        raise NotFoundError("Subtask", subtask_id)
    return subtask


async def _require_task(store: EntityStore, task_id: UUID) -> Task:
    task = await store.get(Task, task_id)
    if task is None:
        raise NotFoundError("Task", task_id)
    return task


async def create_subtask(
    store: EntityStore,
    *,
    task_id: UUID,
    title: str,
    position: int | None = None,
) -> Subtask:
    """Append an uncompleted subtask, or insert it at ``position``."""
    clean_title = validate_subtask_title(title)
    if position is not None:
        require_valid_position(position)
    async with store.transaction():
        await _require_task(store, task_id)
        siblings = await store.list_by_parent(Subtask, task_id)
        if position is None:
            position = append_position(siblings)
        else:
            await apply_writes(store, Subtask, plan_insert(siblings, position))
        now = utcnow()
        subtask = await store.insert(
            Subtask(
                task_id=task_id,
                title=clean_title,
                is_completed=False,
                position=position,
                created_at=now,
                updated_at=now,
            ),
        )
        subtask_id = subtask.id
    logger.info(
        "subtask.created",
        extra={"subtask_id": str(subtask_id), "task_id": str(task_id)},
    )
    return await require_subtask(store, subtask_id)


async def get_subtask(store: EntityStore, subtask_id: UUID) -> Subtask | None:
    return await store.get(Subtask, subtask_id)


async def list_subtasks(store: EntityStore, task_id: UUID) -> list[Subtask]:
    await _require_task(store, task_id)
    return await store.list_by_parent(Subtask, task_id)


async def update_subtask(
    store: EntityStore,
    *,
    subtask_id: UUID,
    title: str | object = UNSET,
    is_completed: bool | object = UNSET,
    position: int | object = UNSET,
    toggle: bool = False,
) -> Subtask:
    """Partial update; ``toggle`` flips completion and overrides ``is_completed``."""
    values: dict[str, object] = {}
    if title is not UNSET:
        values["title"] = validate_subtask_title(title)
    if is_completed is not UNSET:
        values["is_completed"] = bool(is_completed)
    if position is not UNSET:
        require_valid_position(position)
    async with store.transaction():
        subtask = await require_subtask(store, subtask_id)
        if toggle:
            values["is_completed"] = not subtask.is_completed
        if values:
            await store.update(Subtask, subtask_id, {**values, "updated_at": utcnow()})
        if isinstance(position, int):
            siblings = await store.list_by_parent(Subtask, subtask.task_id)
            await apply_writes(store, Subtask, plan_move(siblings, subtask_id, position))
    logger.info("subtask.updated", extra={"subtask_id": str(subtask_id)})
    return await require_subtask(store, subtask_id)


async def move_subtask(
    store: EntityStore,
    *,
    subtask_id: UUID,
    new_position: int,
) -> Subtask:
    """Reorder a subtask within its task, clamping past-the-end positions."""
    require_valid_position(new_position, field="new_position")
    async with store.transaction():
        subtask = await require_subtask(store, subtask_id)
        siblings = await store.list_by_parent(Subtask, subtask.task_id)
        await apply_writes(store, Subtask, plan_move(siblings, subtask_id, new_position))
    logger.info("subtask.moved", extra={"subtask_id": str(subtask_id)})
    return await require_subtask(store, subtask_id)


async def toggle_subtask(store: EntityStore, *, subtask_id: UUID) -> Subtask:
    """Flip the completion flag."""
    async with store.transaction():
        subtask = await require_subtask(store, subtask_id)
        await store.update(
            Subtask,
            subtask_id,
            {"is_completed": not subtask.is_completed, "updated_at": utcnow()},
        )
    toggled = await require_subtask(store, subtask_id)
    logger.info(
        "subtask.toggled",
        extra={"subtask_id": str(subtask_id), "is_completed": toggled.is_completed},
    )
    return toggled


async def delete_subtask(store: EntityStore, *, subtask_id: UUID) -> None:
    async with store.transaction():
        subtask = await require_subtask(store, subtask_id)
        siblings = await store.list_by_parent(Subtask, subtask.task_id)
        await store.delete(Subtask, subtask_id)
        await apply_writes(store, Subtask, plan_delete(siblings, subtask_id))
    logger.info("subtask.deleted", extra={"subtask_id": str(subtask_id)})
