"""Entity store contract shared by the SQL and JSON-file adapters.

Services only talk to an :class:`EntityStore`; which adapter backs it is a
deployment choice (``STORAGE_BACKEND``). Both adapters must provide the same
guarantees:

- ``list_by_parent`` returns siblings ordered by ascending ``position``.
- ``(parent_id, position)`` is unique per positioned entity; a write that would
  duplicate a pair fails with :class:`StorageError`.
- ``delete`` removes every descendant (see :data:`FOREIGN_KEYS`).
- ``transaction()`` is re-entrant; the outermost scope commits once, and any
  failure inside it discards every write made in the scope.
- Failures that are not already :class:`KanbanError` surface as ``StorageError``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import AbstractAsyncContextManager, contextmanager
from typing import Protocol, TypeVar

from sqlmodel import SQLModel

from app.core.errors import KanbanError, StorageError
from app.models.boards import Board
from app.models.columns import BoardColumn
from app.models.subtasks import Subtask
from app.models.tasks import Task

EntityT = TypeVar("EntityT", bound=SQLModel)

# Owner scope of every positioned entity.
PARENT_FIELDS: dict[type[SQLModel], str] = {
    BoardColumn: "board_id",
    Task: "column_id",
    Subtask: "task_id",
}

# Cascading references: child model -> ((field, parent model), ...).
FOREIGN_KEYS: dict[type[SQLModel], tuple[tuple[str, type[SQLModel]], ...]] = {
    BoardColumn: (("board_id", Board),),
    Task: (("column_id", BoardColumn), ("board_id", Board)),
    Subtask: (("task_id", Task),),
}


def parent_field(model: type[SQLModel]) -> str:
    """Return the owner-reference field of a positioned model."""
    try:
        return PARENT_FIELDS[model]
    except KeyError:
        msg = f"{model.__name__} is not a positioned entity"
        raise TypeError(msg) from None


def cascade_children(model: type[SQLModel]) -> list[tuple[type[SQLModel], str]]:
    """Return ``(child model, reference field)`` pairs deleted along with ``model`` rows."""
    return [
        (child, field)
        for child, references in FOREIGN_KEYS.items()
        for field, parent in references
        if parent is model
    ]


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Re-raise unclassified failures as ``StorageError`` with the cause chained."""
    try:
        yield
    except KanbanError:
        raise
    except Exception as exc:
        raise StorageError(f"Failed to {action}", exc) from exc


class EntityStore(Protocol):
    """Row-level persistence used by the entity services."""

    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Group writes so they are applied all together or not at all."""
        ...

    async def insert(self, row: EntityT) -> EntityT:
        """Persist a new row and return it."""
        ...

    async def get(self, model: type[EntityT], entity_id: object) -> EntityT | None:
        """Point lookup by primary key."""
        ...

    async def list_by_parent(self, model: type[EntityT], parent_id: object) -> list[EntityT]:
        """Return the rows owned by ``parent_id`` ordered by position."""
        ...

    async def list_all(self, model: type[EntityT]) -> list[EntityT]:
        """Return every row of ``model`` ordered by creation time."""
        ...

    async def count(self, model: type[SQLModel]) -> int:
        """Return the number of ``model`` rows."""
        ...

    async def update(
        self,
        model: type[SQLModel],
        entity_id: object,
        values: Mapping[str, object],
    ) -> None:
        """Write ``values`` onto the row with ``entity_id``."""
        ...

    async def delete(self, model: type[SQLModel], entity_id: object) -> None:
        """Delete the row and, transitively, everything it owns."""
        ...
