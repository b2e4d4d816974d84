"""Column CRUD and reordering within a board."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.core.errors import BusinessRuleError, NotFoundError
from app.core.logging import get_logger
from app.core.time import utcnow
from app.models.columns import DEFAULT_COLUMN_COLOR, BoardColumn
from app.services.boards import require_board
from app.services.positions import (
    append_position,
    apply_writes,
    plan_delete,
    plan_insert,
    plan_move,
    require_valid_position,
)
from app.services.validation import UNSET, validate_color, validate_column_name

if TYPE_CHECKING:
    from uuid import UUID

    from app.stores.base import EntityStore

logger = get_logger(__name__)


async def require_column(store: EntityStore, column_id: UUID) -> BoardColumn:
    column = await store.get(BoardColumn, column_id)
    if column is None:
        raise NotFoundError("Column", column_id)
    return column


async def create_column(
    store: EntityStore,
    *,
    board_id: UUID,
    name: str,
    color: str = DEFAULT_COLUMN_COLOR,
    position: int | None = None,
) -> BoardColumn:
    """Append a column to ``board_id``, or insert it at ``position``."""
    clean_name = validate_column_name(name)
    clean_color = validate_color(color)
    if position is not None:
        require_valid_position(position)
    async with store.transaction():
        await require_board(store, board_id)
        siblings = await store.list_by_parent(BoardColumn, board_id)
        if position is None:
            position = append_position(siblings)
        else:
            await apply_writes(store, BoardColumn, plan_insert(siblings, position))
        now = utcnow()
        column = await store.insert(
            BoardColumn(
                board_id=board_id,
                name=clean_name,
                color=clean_color,
                position=position,
                created_at=now,
                updated_at=now,
            ),
        )
        column_id = column.id
    logger.info(
        "column.created",
        extra={"column_id": str(column_id), "board_id": str(board_id), "position": position},
    )
    return await require_column(store, column_id)


async def get_column(store: EntityStore, column_id: UUID) -> BoardColumn | None:
    return await store.get(BoardColumn, column_id)


async def list_columns(store: EntityStore, board_id: UUID) -> list[BoardColumn]:
    """Return the columns of a board in display order."""
    await require_board(store, board_id)
    return await store.list_by_parent(BoardColumn, board_id)


async def _reorder(store: EntityStore, column: BoardColumn, new_position: int) -> None:
    siblings = await store.list_by_parent(BoardColumn, column.board_id)
    await apply_writes(store, BoardColumn, plan_move(siblings, column.id, new_position))


async def update_column(
    store: EntityStore,
    *,
    column_id: UUID,
    name: str | object = UNSET,
    color: str | object = UNSET,
    position: int | object = UNSET,
) -> BoardColumn:
    """Rename or recolor a column; a new ``position`` reorders it within its board."""
    values: dict[str, object] = {}
    if name is not UNSET:
        values["name"] = validate_column_name(name)
    if color is not UNSET:
        values["color"] = validate_color(color)
    if position is not UNSET:
        require_valid_position(position)
    async with store.transaction():
        column = await require_column(store, column_id)
        if values:
            await store.update(BoardColumn, column_id, {**values, "updated_at": utcnow()})
        if isinstance(position, int):
            await _reorder(store, column, position)
    logger.info("column.updated", extra={"column_id": str(column_id)})
    return await require_column(store, column_id)


async def move_column(
    store: EntityStore,
    *,
    column_id: UUID,
    new_position: int,
) -> BoardColumn:
    """Move a column to ``new_position``, clamped to the last slot of its board."""
    require_valid_position(new_position, field="new_position")
    async with store.transaction():
        column = await require_column(store, column_id)
        await _reorder(store, column, new_position)
    moved = await require_column(store, column_id)
    logger.info(
        "column.moved",
        extra={"column_id": str(column_id), "position": moved.position},
    )
    return moved


async def delete_column(store: EntityStore, *, column_id: UUID) -> None:
    """Delete a column and its tasks; the board's last column is protected."""
    async with store.transaction():
        column = await require_column(store, column_id)
        siblings = await store.list_by_parent(BoardColumn, column.board_id)
        if len(siblings) <= 1:
            msg = "Cannot delete the last column in a board"
            raise BusinessRuleError(msg)
        await store.delete(BoardColumn, column_id)
        await apply_writes(store, BoardColumn, plan_delete(siblings, column_id))
    logger.info("column.deleted", extra={"column_id": str(column_id)})
