"""
Async SQLAlchemy engine, session, and schema helpers.

``create_engine_for_url()`` builds an engine for a database URL, creating
the parent directory of a file-based SQLite database first.
``session_scope()`` yields an ``AsyncSession`` that auto-commits on clean
exit and rolls back on error.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


def sqlite_file_path(url: str) -> Path | None:
    """Return the database file of a SQLite URL, or ``None`` for other URLs and ``:memory:``."""
    parsed = make_url(url)
    if not parsed.drivername.startswith("sqlite"):
        return None
    if not parsed.database or parsed.database == ":memory:":
        return None
    return Path(parsed.database)


def create_engine_for_url(url: str) -> AsyncEngine:
    """Create an async engine, making sure a SQLite file's directory exists."""
    db_file = sqlite_file_path(url)
    if db_file is not None:
        db_file.parent.mkdir(parents=True, exist_ok=True)
    return create_async_engine(url, echo=False)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Yield an ``AsyncSession`` that commits on success, rolls back on error."""
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(engine: AsyncEngine) -> None:
    """Create all tables (idempotent)."""
    # Register ORM models on Base.metadata before create_all
    from src.services.storage import models_db  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
