# ruff: noqa: INP001
"""Pytest configuration shared across backend tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
import pytest_asyncio

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Import-time settings must not touch a developer's real database or JSON file.
os.environ["ENVIRONMENT"] = "test"
os.environ["STORAGE_BACKEND"] = "sql"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DB_AUTO_MIGRATE"] = "false"
os.environ["SEED_DEFAULT_BOARD"] = "false"

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

from app.db.session import configure_engine  # noqa: E402
from app.stores.json_file import JsonFileEntityStore  # noqa: E402
from app.stores.sql import SqlEntityStore  # noqa: E402

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from app.stores.base import EntityStore


async def make_engine() -> AsyncEngine:
    """In-memory SQLite engine with the schema created and foreign keys enforced."""
    engine = configure_engine(create_async_engine("sqlite+aiosqlite:///:memory:"))
    async with engine.connect() as conn, conn.begin():
        await conn.run_sync(SQLModel.metadata.create_all)
    return engine


@pytest.fixture(params=["sql", "json"])
def backend(request: pytest.FixtureRequest) -> str:
    return str(request.param)


@pytest_asyncio.fixture
async def store(backend: str, tmp_path: Path) -> AsyncIterator[EntityStore]:
    """Fresh, empty entity store; every test using it runs once per backend."""
    if backend == "json":
        yield JsonFileEntityStore(tmp_path / "kanban.json")
        return
    engine = await make_engine()
    try:
        async with AsyncSession(engine, expire_on_commit=False) as session:
            yield SqlEntityStore(session)
    finally:
        await engine.dispose()
