"""Entity store backed by an SQLModel async session."""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, col, select

from app.core.errors import KanbanError, StorageError
from app.core.logging import get_logger
from app.stores.base import EntityT, parent_field, storage_errors

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession
    from sqlmodel.sql.expression import SelectOfScalar

logger = get_logger(__name__)


class SqlEntityStore:
    """Relational adapter; cascades and uniqueness come from the schema itself.

    Rows are handed out detached. Updates, cascaded deletes and position shifts
    run as SQL statements outside the unit of work, so callers get value
    snapshots that a later rollback or bulk update never mutates.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._depth = 0

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        self._depth += 1
        outermost = self._depth == 1
        try:
            yield
            if outermost:
                await self.session.commit()
        except KanbanError:
            if outermost:
                await self._rollback()
            raise
        except Exception as exc:
            if outermost:
                await self._rollback()
            msg = "Storage transaction failed"
            raise StorageError(msg, exc) from exc
        finally:
            self._depth -= 1

    async def _rollback(self) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError:
            logger.exception("Failed to rollback session after store error.")

    async def _autocommit(self) -> None:
        if self._depth == 0:
            await self.session.commit()

    async def insert(self, row: EntityT) -> EntityT:
        with storage_errors(f"insert {type(row).__name__}"):
            self.session.add(row)
            await self.session.flush()
            self.session.expunge(row)
            await self._autocommit()
        return row

    async def get(self, model: type[EntityT], entity_id: object) -> EntityT | None:
        statement = select(model).where(col(model.id) == entity_id)  # type: ignore[attr-defined]
        with storage_errors(f"read {model.__name__}"):
            row = (await self.session.exec(statement)).first()
            self.session.expunge_all()
        return row

    async def list_by_parent(self, model: type[EntityT], parent_id: object) -> list[EntityT]:
        statement = (
            select(model)
            .where(col(getattr(model, parent_field(model))) == parent_id)
            .order_by(col(model.position).asc())  # type: ignore[attr-defined]
        )
        return await self._detached(statement, f"list {model.__name__}")

    async def list_all(self, model: type[EntityT]) -> list[EntityT]:
        statement = select(model)
        if "created_at" in model.model_fields:
            statement = statement.order_by(col(model.created_at).asc())  # type: ignore[attr-defined]
        return await self._detached(statement, f"list {model.__name__}")

    async def _detached(self, statement: SelectOfScalar[EntityT], action: str) -> list[EntityT]:
        with storage_errors(action):
            rows = list(await self.session.exec(statement))
            self.session.expunge_all()
        return rows

    async def count(self, model: type[SQLModel]) -> int:
        statement = select(func.count()).select_from(model)
        with storage_errors(f"count {model.__name__}"):
            return int((await self.session.exec(statement)).one())

    async def update(
        self,
        model: type[SQLModel],
        entity_id: object,
        values: Mapping[str, object],
    ) -> None:
        statement = (
            update(model)
            .where(col(model.id) == entity_id)  # type: ignore[attr-defined]
            .values(**values)
        )
        with storage_errors(f"update {model.__name__}"):
            await self.session.exec(statement)  # type: ignore[call-overload]
            await self._autocommit()

    async def delete(self, model: type[SQLModel], entity_id: object) -> None:
        statement = delete(model).where(col(model.id) == entity_id)  # type: ignore[attr-defined]
        with storage_errors(f"delete {model.__name__}"):
            await self.session.exec(statement)  # type: ignore[call-overload]
            await self._autocommit()
