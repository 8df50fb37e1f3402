from __future__ import annotations

import asyncio
import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.infrastructure.db.schema import ensure_schema

logger = logging.getLogger(__name__)


def create_engine(database_url: str) -> AsyncEngine:
    return create_async_engine(database_url, echo=False)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


class Database:
    """Lazily opened handle to the local SQLite store.

    The first caller of `ready()` opens the engine, applies the journal mode
    and migrates the schema; concurrent callers await that same in-flight
    initialization. A failed initialization is not memoized.
    """

    def __init__(self, database_url: str, *, journal_mode: str = "WAL") -> None:
        self.database_url = database_url
        self.journal_mode = journal_mode
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._init_task: asyncio.Future[AsyncEngine] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_engine(self.database_url)
        return self._engine

    async def ready(self) -> AsyncEngine:
        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._initialize())
        task = self._init_task
        try:
            return await asyncio.shield(task)
        except BaseException:
            if self._init_task is task and task.done():
                if task.cancelled() or task.exception() is not None:
                    self._init_task = None
            raise

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = create_session_factory(self.engine)
        return self._session_factory

    async def ensure_schema(self) -> list[str]:
        async with self.engine.begin() as conn:
            return await conn.run_sync(ensure_schema)

    async def dispose(self) -> None:
        task, self._init_task = self._init_task, None
        if task is not None and not task.done():
            task.cancel()
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    async def _initialize(self) -> AsyncEngine:
        engine = self.engine
        async with engine.connect() as conn:
            result = await conn.exec_driver_sql(f"PRAGMA journal_mode={self.journal_mode}")
            logger.debug("SQLite journal mode: %s", result.scalar())
            await conn.commit()
        added = await self.ensure_schema()
        if added:
            logger.info("Migrated animals table, added columns: %s", ", ".join(added))
        return engine
