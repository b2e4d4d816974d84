"""Dense position maintenance for every ordered list in the board hierarchy.

Columns within a board, tasks within a column and subtasks within a task all
carry an integer ``position`` that must stay exactly ``0..n-1`` inside its
parent scope after every committed mutation. The planners here are pure and
parent-agnostic: given the current siblings (ordered by position) they return
the row writes that restore density, in an order that is safe to apply one
statement at a time against a ``UNIQUE(parent_id, position)`` constraint:

- a moved row is first parked at :data:`PARKED_POSITION`, which no live row
  ever holds;
- rows shifting towards the front are written lowest position first;
- rows shifting towards the back are written highest position first;
- the moved row's final position (and, for transfers, its new parent) is
  written last.

:func:`apply_writes` pushes a plan through an :class:`EntityStore`; callers own
the surrounding transaction.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from app.core.errors import ValidationError
from app.core.time import utcnow
from app.stores.base import parent_field

if TYPE_CHECKING:
    from sqlmodel import SQLModel

    from app.stores.base import EntityStore

PARKED_POSITION = -1
_NEW_ITEM = object()


class Positioned(Protocol):
    """Anything with an id and a position inside its parent scope."""

    id: Any
    position: int


@dataclass(frozen=True)
class PositionWrite:
    """One row update produced by a planner."""

    entity_id: Any
    position: int
    # Only set on the final write of a cross-parent transfer.
    parent_id: Any = None


def is_dense(positions: Iterable[int]) -> bool:
    """Return whether ``positions`` is exactly ``0..n-1`` with no gaps or duplicates."""
    ordered = sorted(positions)
    return ordered == list(range(len(ordered)))


def require_valid_position(position: object, *, field: str = "position") -> int:
    """Reject anything that is not a non-negative integer."""
    if isinstance(position, bool) or not isinstance(position, int):
        raise ValidationError("Position must be an integer", field=field)
    if position < 0:
        raise ValidationError("Position must be non-negative", field=field)
    return position


def append_position(siblings: Sequence[Positioned]) -> int:
    """Position taken by a new item appended to the end of ``siblings``."""
    return len(siblings)


def _index_of(siblings: Sequence[Positioned], item_id: object) -> int:
    for index, sibling in enumerate(siblings):
        if sibling.id == item_id:
            return index
    msg = f"{item_id} is not one of the given siblings"
    raise ValueError(msg)


def _shift_writes(rows: Iterable[Positioned], layout: Sequence[object]) -> list[PositionWrite]:
    """Writes moving ``rows`` to their index in ``layout``, in collision-free order."""
    current = {row.id: row.position for row in rows}
    forward: list[PositionWrite] = []
    backward: list[PositionWrite] = []
    for index, entity_id in enumerate(layout):
        if entity_id not in current or current[entity_id] == index:
            continue
        write = PositionWrite(entity_id=entity_id, position=index)
        if index < current[entity_id]:
            forward.append(write)
        else:
            backward.append(write)
    forward.sort(key=lambda write: write.position)
    backward.sort(key=lambda write: write.position, reverse=True)
    return forward + backward


def plan_insert(siblings: Sequence[Positioned], position: int) -> list[PositionWrite]:
    """Open a slot at ``position``; every sibling at or after it moves back by one.

    ``position`` may equal ``len(siblings)`` (append) but never exceed it.
    """
    require_valid_position(position)
    if position > len(siblings):
        raise ValidationError(
            f"Position must be between 0 and {len(siblings)}",
            field="position",
        )
    layout: list[object] = [sibling.id for sibling in siblings]
    layout.insert(position, _NEW_ITEM)
    return _shift_writes(siblings, layout)


def plan_delete(siblings: Sequence[Positioned], removed_id: object) -> list[PositionWrite]:
    """Close the gap left by ``removed_id``; apply after the row is deleted."""
    _index_of(siblings, removed_id)
    remaining = [sibling for sibling in siblings if sibling.id != removed_id]
    return _shift_writes(remaining, [sibling.id for sibling in remaining])


def plan_move(
    siblings: Sequence[Positioned],
    item_id: object,
    new_position: int,
) -> list[PositionWrite]:
    """Reorder ``item_id`` within its own parent.

    ``new_position`` past the end is clamped to the last slot. Moving an item
    onto its current position yields an empty plan.
    """
    require_valid_position(new_position, field="new_position")
    old_index = _index_of(siblings, item_id)
    target = min(new_position, len(siblings) - 1)
    if target == old_index:
        return []
    others = [sibling for sibling in siblings if sibling.id != item_id]
    layout: list[object] = [sibling.id for sibling in others]
    layout.insert(target, item_id)
    return [
        PositionWrite(entity_id=item_id, position=PARKED_POSITION),
        *_shift_writes(others, layout),
        PositionWrite(entity_id=item_id, position=target),
    ]


def plan_transfer(
    source_siblings: Sequence[Positioned],
    target_siblings: Sequence[Positioned],
    item_id: object,
    new_position: int,
    *,
    target_parent_id: object,
) -> list[PositionWrite]:
    """Move ``item_id`` out of its parent and into ``target_parent_id``.

    The source list closes its gap, the target list opens a slot at
    ``new_position`` (clamped to append when past the end), and the moved row
    takes the slot along with its new parent reference.
    """
    require_valid_position(new_position, field="new_position")
    _index_of(source_siblings, item_id)
    if any(sibling.id == item_id for sibling in target_siblings):
        msg = "Transfers need distinct source and target scopes; use plan_move instead"
        raise ValueError(msg)
    target = min(new_position, len(target_siblings))
    remaining = [sibling for sibling in source_siblings if sibling.id != item_id]
    target_layout: list[object] = [sibling.id for sibling in target_siblings]
    target_layout.insert(target, item_id)
    return [
        PositionWrite(entity_id=item_id, position=PARKED_POSITION),
        *_shift_writes(remaining, [sibling.id for sibling in remaining]),
        *_shift_writes(target_siblings, target_layout),
        PositionWrite(entity_id=item_id, position=target, parent_id=target_parent_id),
    ]


async def apply_writes(
    store: EntityStore,
    model: type[SQLModel],
    writes: Sequence[PositionWrite],
    *,
    moved_values: Mapping[str, object] | None = None,
) -> None:
    """Persist ``writes`` in order; ``moved_values`` ride along with a parent change."""
    now = utcnow()
    for write in writes:
        values: dict[str, object] = {"position": write.position, "updated_at": now}
        if write.parent_id is not None:
            values[parent_field(model)] = write.parent_id
            if moved_values:
                values.update(moved_values)
        await store.update(model, write.entity_id, values)
