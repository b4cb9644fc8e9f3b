"""Database storage context.

There is no module-level engine: a Database is constructed explicitly,
opened at process start and closed at shutdown. The FastAPI app keeps its
instance on ``app.state.database``.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from mjleague.db.models import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # noqa: ANN001
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and session factory for one database."""

    def __init__(self, url: str, echo: bool = False) -> None:
        """Initialize the storage context.

        Args:
            url: SQLAlchemy async database URL
            echo: Log emitted SQL
        """
        self.url = url
        self.echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.url).get_backend_name() == "sqlite"

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    async def open(self, create_tables: bool = True) -> None:
        """Create the engine and, optionally, any missing tables."""
        if self._engine is not None:
            return

        url = make_url(self.url)
        if self.is_sqlite and url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        self._engine = create_async_engine(self.url, echo=self.echo, pool_pre_ping=True)
        if self.is_sqlite:
            event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        if create_tables:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        logger.info(f"Database opened ({url.get_backend_name()})")

    async def close(self) -> None:
        """Dispose the engine."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Open a session; rolls back if the block raises."""
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        async with self._session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a session from the app's Database."""
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
