"""Database engine, session factory, store selection and startup helpers."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from alembic.config import Config
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app import models as _models
from app.core.config import settings
from app.core.logging import get_logger
from app.core.storage_backend import StorageBackend
from app.services.boards import ensure_default_board
from app.stores.json_file import JsonFileEntityStore
from app.stores.sql import SqlEntityStore

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, AsyncIterator

    from app.stores.base import EntityStore

# Import model modules so SQLModel metadata is fully registered at startup.
_MODEL_REGISTRY = _models


def _normalize_database_url(database_url: str) -> str:
    if "://" not in database_url:
        return database_url
    scheme, rest = database_url.split("://", 1)
    if scheme == "postgresql":
        return f"postgresql+psycopg://{rest}"
    if scheme == "sqlite":
        return f"sqlite+aiosqlite://{rest}"
    return database_url


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def configure_engine(engine: AsyncEngine) -> AsyncEngine:
    """Turn on SQLite foreign key enforcement so deletes cascade."""
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


async_engine: AsyncEngine = configure_engine(
    create_async_engine(
        _normalize_database_url(settings.database_url),
        pool_pre_ping=True,
    ),
)
async_session_maker = async_sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)
logger = get_logger(__name__)


def _alembic_config() -> Config:
    alembic_ini = Path(__file__).resolve().parents[2] / "alembic.ini"

    alembic_cfg = Config(str(alembic_ini))
    alembic_cfg.attributes["configure_logger"] = False
    return alembic_cfg


def run_migrations() -> None:
    """Apply Alembic migrations to the latest revision."""
    from alembic import command

    logger.info("Running database migrations.")
    command.upgrade(_alembic_config(), "head")
    logger.info("Database migrations complete.")


def _ensure_sqlite_directory(database_url: str) -> None:
    _, _, path = database_url.partition(":///")
    if path and not path.startswith(":memory:"):
        Path(path).parent.mkdir(parents=True, exist_ok=True)


async def _init_schema() -> None:
    if async_engine.dialect.name == "sqlite":
        _ensure_sqlite_directory(settings.database_url)
    if settings.db_auto_migrate:
        versions_dir = Path(__file__).resolve().parents[2] / "migrations" / "versions"
        if any(versions_dir.glob("*.py")):
            logger.info("Running migrations on startup")
            await asyncio.to_thread(run_migrations)
            return
        logger.warning("No migration revisions found; falling back to create_all")

    async with async_engine.connect() as conn, conn.begin():
        await conn.run_sync(SQLModel.metadata.create_all)


async def init_db() -> None:
    """Prepare the configured store and seed the default board when enabled."""
    if settings.storage_backend == StorageBackend.SQL:
        await _init_schema()
    if not settings.seed_default_board:
        return
    async with open_store() as store:
        board = await ensure_default_board(store)
    if board is not None:
        logger.info("Seeded default board %s", board.id)


@asynccontextmanager
async def open_session() -> AsyncIterator[AsyncSession]:
    """Open an async DB session that is rolled back if left mid-transaction."""
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            in_txn = False
            try:
                in_txn = bool(session.in_transaction())
            except SQLAlchemyError:
                logger.exception("Failed to inspect session transaction state.")
            if in_txn:
                try:
                    await session.rollback()
                except SQLAlchemyError:
                    logger.exception("Failed to rollback session after request error.")


@asynccontextmanager
async def open_store() -> AsyncIterator[EntityStore]:
    """Open the entity store selected by ``STORAGE_BACKEND``."""
    if settings.storage_backend == StorageBackend.JSON:
        yield JsonFileEntityStore(settings.json_store_path)
        return
    async with open_session() as session:
        yield SqlEntityStore(session)


async def get_store() -> AsyncGenerator[EntityStore, None]:
    """Yield a request-scoped entity store."""
    async with open_store() as store:
        yield store
