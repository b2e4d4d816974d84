"""Entity store that keeps the whole dataset in one JSON document on disk.

This is the file-backed counterpart of the relational store, meant for
single-user deployments without a database. The document is loaded lazily,
mutated in memory, and written back atomically (temp file + replace). Foreign
key checks, cascades and ``(parent, position)`` uniqueness are enforced here
because there is no schema to do it.
"""

from __future__ import annotations

import copy
import json
import os
import tempfile
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from sqlmodel import SQLModel

from app.core.errors import KanbanError, StorageError
from app.models.boards import Board
from app.models.columns import BoardColumn
from app.models.subtasks import Subtask
from app.models.tasks import Task
from app.models.theme_preferences import ThemePreference
from app.stores.base import (
    FOREIGN_KEYS,
    PARENT_FIELDS,
    EntityT,
    cascade_children,
    parent_field,
    storage_errors,
)

Record = dict[str, Any]

TABLE_KEYS: dict[type[SQLModel], str] = {
    Board: "boards",
    BoardColumn: "columns",
    Task: "tasks",
    Subtask: "subtasks",
    ThemePreference: "theme_preferences",
}


def _key(value: object) -> str:
    return str(value)


class JsonFileEntityStore:
    """Whole-document JSON adapter implementing the entity store contract."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._data: dict[str, list[Record]] | None = None
        self._snapshot: dict[str, list[Record]] | None = None
        self._depth = 0

    # -- document lifecycle -------------------------------------------------

    def _tables(self) -> dict[str, list[Record]]:
        if self._data is None:
            self._data = self._load()
        return self._data

    def _load(self) -> dict[str, list[Record]]:
        with storage_errors(f"read {self.path}"):
            if not self.path.exists():
                return {table: [] for table in TABLE_KEYS.values()}
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            msg = f"Malformed JSON store at {self.path}: expected an object"
            raise StorageError(msg)
        return {table: list(raw.get(table, [])) for table in TABLE_KEYS.values()}

    def _persist(self) -> None:
        with storage_errors(f"write {self.path}"):
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(self._tables(), handle, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise

    def _autocommit(self) -> None:
        if self._depth == 0:
            self._persist()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        self._depth += 1
        outermost = self._depth == 1
        if outermost:
            self._snapshot = copy.deepcopy(self._tables())
        try:
            yield
            if outermost:
                self._persist()
        except KanbanError:
            if outermost:
                self._restore()
            raise
        except Exception as exc:
            if outermost:
                self._restore()
            msg = "Storage transaction failed"
            raise StorageError(msg, exc) from exc
        finally:
            self._depth -= 1
            if outermost:
                self._snapshot = None

    def _restore(self) -> None:
        if self._snapshot is not None:
            self._data = self._snapshot

    # -- row helpers ----------------------------------------------------------

    def _records(self, model: type[SQLModel]) -> list[Record]:
        return self._tables()[TABLE_KEYS[model]]

    def _find(self, model: type[SQLModel], entity_id: object) -> Record | None:
        wanted = _key(entity_id)
        for record in self._records(model):
            if record.get("id") == wanted:
                return record
        return None

    @staticmethod
    def _row(model: type[EntityT], record: Record) -> EntityT:
        return model.model_validate(record)

    def _check_constraints(self, row: SQLModel, *, replacing: Record | None) -> None:
        model = type(row)
        for field, parent in FOREIGN_KEYS.get(model, ()):
            if self._find(parent, getattr(row, field)) is None:
                msg = (
                    f"FOREIGN KEY constraint failed: {TABLE_KEYS[model]}.{field} "
                    f"references missing {TABLE_KEYS[parent]} row"
                )
                raise StorageError(msg)
        if model not in PARENT_FIELDS:
            return
        field = parent_field(model)
        owner = _key(getattr(row, field))
        position = row.position  # type: ignore[attr-defined]
        for record in self._records(model):
            if record is replacing:
                continue
            if record.get(field) == owner and record.get("position") == position:
                msg = (
                    f"UNIQUE constraint failed: {TABLE_KEYS[model]}.{field}, "
                    f"{TABLE_KEYS[model]}.position"
                )
                raise StorageError(msg)

    # -- EntityStore API --------------------------------------------------------

    async def insert(self, row: EntityT) -> EntityT:
        model = type(row)
        with storage_errors(f"insert {model.__name__}"):
            if self._find(model, row.id) is not None:  # type: ignore[attr-defined]
                msg = f"UNIQUE constraint failed: {TABLE_KEYS[model]}.id"
                raise StorageError(msg)
            self._check_constraints(row, replacing=None)
            self._records(model).append(row.model_dump(mode="json"))
            self._autocommit()
        return self._row(model, self._records(model)[-1])

    async def get(self, model: type[EntityT], entity_id: object) -> EntityT | None:
        with storage_errors(f"read {model.__name__}"):
            record = self._find(model, entity_id)
            return None if record is None else self._row(model, record)

    async def list_by_parent(self, model: type[EntityT], parent_id: object) -> list[EntityT]:
        field = parent_field(model)
        owner = _key(parent_id)
        with storage_errors(f"list {model.__name__}"):
            rows = [
                self._row(model, record)
                for record in self._records(model)
                if record.get(field) == owner
            ]
        return sorted(rows, key=lambda row: row.position)  # type: ignore[attr-defined]

    async def list_all(self, model: type[EntityT]) -> list[EntityT]:
        with storage_errors(f"list {model.__name__}"):
            rows = [self._row(model, record) for record in self._records(model)]
        if "created_at" in model.model_fields:
            rows.sort(key=lambda row: row.created_at)  # type: ignore[attr-defined]
        return rows

    async def count(self, model: type[SQLModel]) -> int:
        with storage_errors(f"count {model.__name__}"):
            return len(self._records(model))

    async def update(
        self,
        model: type[SQLModel],
        entity_id: object,
        values: Mapping[str, object],
    ) -> None:
        with storage_errors(f"update {model.__name__}"):
            record = self._find(model, entity_id)
            if record is None:
                return
            row = model.model_validate({**record, **values})
            self._check_constraints(row, replacing=record)
            record.clear()
            record.update(row.model_dump(mode="json"))
            self._autocommit()

    async def delete(self, model: type[SQLModel], entity_id: object) -> None:
        with storage_errors(f"delete {model.__name__}"):
            self._delete_cascade(model, _key(entity_id))
            self._autocommit()

    def _delete_cascade(self, model: type[SQLModel], entity_id: str) -> None:
        for child, field in cascade_children(model):
            owned = [
                record["id"] for record in self._records(child) if record.get(field) == entity_id
            ]
            for child_id in owned:
                self._delete_cascade(child, child_id)
        records = self._records(model)
        records[:] = [record for record in records if record.get("id") != entity_id]
