from __future__ import annotations

import sys
from collections.abc import AsyncIterator
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

# ruff: noqa: E402
from src.application.interfaces.repositories.animals import AnimalRepository
from src.infrastructure.db.session import Database
from src.infrastructure.repos.animals_blob import AnimalsBlobRepository
from src.infrastructure.repos.animals_sqlalchemy import AnimalsSQLAlchemyRepository
from src.infrastructure.storage.memory import MemoryKeyValueStore


class StepClock:
    """Deterministic clock: every call returns `step` later than the previous one."""

    def __init__(
        self,
        start: datetime = datetime(2025, 9, 4, 12, 0, tzinfo=timezone.utc),
        step: timedelta = timedelta(seconds=1),
    ) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        return value


@pytest.fixture()
def clock() -> StepClock:
    return StepClock()


@pytest.fixture()
def frozen_clock() -> StepClock:
    return StepClock(step=timedelta(0))


@pytest.fixture()
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'herd.db'}"


@pytest.fixture()
async def database(database_url: str) -> AsyncIterator[Database]:
    db = Database(database_url)
    yield db
    await db.dispose()


@pytest.fixture()
def sqlite_repo(database: Database) -> AnimalsSQLAlchemyRepository:
    return AnimalsSQLAlchemyRepository(database)


@pytest.fixture()
def memory_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def blob_repo(memory_store: MemoryKeyValueStore) -> AnimalsBlobRepository:
    return AnimalsBlobRepository(memory_store)


@pytest.fixture(params=["sqlite", "blob"])
def repo(request, sqlite_repo, blob_repo) -> AnimalRepository:
    return sqlite_repo if request.param == "sqlite" else blob_repo
