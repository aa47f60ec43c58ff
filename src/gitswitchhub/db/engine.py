"""Database engine and session management."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel
from structlog import get_logger

from gitswitchhub.exceptions import DatabaseError


logger = get_logger(__name__)


def get_db_url(path: Path) -> str:
    """Get SQLite database URL."""
    path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite+aiosqlite:///{path}"


class Database:
    """Async SQLite handle with a single serialized access path.

    SQLite connections are not safe to share between concurrent writers, so
    every session is opened under one lock. Keep sessions short and never
    hold one across a network call.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._engine: AsyncEngine = create_async_engine(get_db_url(path), echo=False)
        self._session_maker = async_sessionmaker(
            self._engine, class_=AsyncSession, expire_on_commit=False
        )
        self._lock = asyncio.Lock()

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def create_tables(self) -> None:
        """Create tables that do not exist yet."""
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to initialize database: {e}") from e

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Open a session; commits on success, rolls back on error."""
        async with self._lock, self._session_maker() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Database operation failed: {e}") from e
            except BaseException:
                await session.rollback()
                raise

    async def close(self) -> None:
        await self._engine.dispose()


async def init_db(path: Path) -> Database:
    """Open the database at ``path`` and create its tables."""
    db = Database(path)
    await db.create_tables()
    logger.debug("database_initialized", path=str(path))
    return db
