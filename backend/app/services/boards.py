"""Board lifecycle: creation with the default workflow and guarded deletion."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.core.errors import BusinessRuleError, NotFoundError
from app.core.logging import get_logger
from app.core.time import utcnow
from app.models.boards import Board
from app.models.columns import DEFAULT_COLUMN_COLOR, BoardColumn
from app.services.validation import UNSET, validate_board_name

if TYPE_CHECKING:
    from uuid import UUID

    from app.stores.base import EntityStore

logger = get_logger(__name__)

DEFAULT_BOARD_NAME = "My Board"
DEFAULT_COLUMN_NAMES = ("Todo", "Doing", "Done")


async def require_board(store: EntityStore, board_id: UUID) -> Board:
    board = await store.get(Board, board_id)
    if board is None:
        raise NotFoundError("Board", board_id)
    return board


async def _insert_board_with_columns(store: EntityStore, name: str) -> Board:
    now = utcnow()
    board = await store.insert(Board(name=name, created_at=now, updated_at=now))
    for position, column_name in enumerate(DEFAULT_COLUMN_NAMES):
        await store.insert(
            BoardColumn(
                board_id=board.id,
                name=column_name,
                color=DEFAULT_COLUMN_COLOR,
                position=position,
                created_at=now,
                updated_at=now,
            ),
        )
    return board


async def create_board(store: EntityStore, *, name: str) -> Board:
    """Create a board seeded with Todo, Doing and Done columns."""
    clean_name = validate_board_name(name)
    async with store.transaction():
        board = await _insert_board_with_columns(store, clean_name)
    logger.info("board.created", extra={"board_id": str(board.id)})
    return await require_board(store, board.id)


async def get_board(store: EntityStore, board_id: UUID) -> Board | None:
    return await store.get(Board, board_id)


async def list_boards(store: EntityStore) -> list[Board]:
    """Return every board, oldest first."""
    return await store.list_all(Board)


async def update_board(
    store: EntityStore,
    *,
    board_id: UUID,
    name: str | object = UNSET,
) -> Board:
    values: dict[str, object] = {}
    if name is not UNSET:
        values["name"] = validate_board_name(name)
    async with store.transaction():
        await require_board(store, board_id)
        if values:
            await store.update(Board, board_id, {**values, "updated_at": utcnow()})
    logger.info("board.updated", extra={"board_id": str(board_id)})
    return await require_board(store, board_id)


async def delete_board(store: EntityStore, *, board_id: UUID) -> None:
    """Delete a board with all of its columns, tasks and subtasks.

    The last remaining board can never be deleted.
    """
    async with store.transaction():
        await require_board(store, board_id)
        if await store.count(Board) <= 1:
            msg = "Cannot delete the last remaining board"
            raise BusinessRuleError(msg)
        await store.delete(Board, board_id)
    logger.info("board.deleted", extra={"board_id": str(board_id)})


async def ensure_default_board(store: EntityStore) -> Board | None:
    """Seed ``My Board`` when the store holds no boards; return it if created."""
    async with store.transaction():
        if await store.count(Board) > 0:
            return None
        board = await _insert_board_with_columns(store, DEFAULT_BOARD_NAME)
    logger.info("board.seeded", extra={"board_id": str(board.id)})
    return board
