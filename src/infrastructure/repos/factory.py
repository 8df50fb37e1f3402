from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache

from src.application.interfaces.repositories.animals import AnimalRepository
from src.config.settings import Settings, get_settings
from src.infrastructure.db.session import Database
from src.infrastructure.repos.animals_blob import AnimalsBlobRepository
from src.infrastructure.repos.animals_sqlalchemy import AnimalsSQLAlchemyRepository
from src.infrastructure.storage.files import FileKeyValueStore

logger = logging.getLogger(__name__)


class StorageBackend(str, Enum):
    SQLITE = "sqlite"
    BLOB = "blob"


def select_backend(settings: Settings) -> StorageBackend:
    """Explicit `storage_backend` wins; otherwise web runtimes get the blob store."""
    if settings.storage_backend != "auto":
        return StorageBackend(settings.storage_backend)
    if settings.platform == "web":
        return StorageBackend.BLOB
    return StorageBackend.SQLITE


def create_animal_repository(settings: Settings) -> AnimalRepository:
    backend = select_backend(settings)
    logger.info("Animal storage backend: %s (platform=%s)", backend.value, settings.platform)
    if backend is StorageBackend.BLOB:
        return AnimalsBlobRepository(
            FileKeyValueStore(settings.blob_storage_dir), key=settings.blob_storage_key
        )
    return AnimalsSQLAlchemyRepository(
        Database(settings.database_url, journal_mode=settings.sqlite_journal_mode)
    )


@lru_cache(maxsize=1)
def get_animal_repository() -> AnimalRepository:
    return create_animal_repository(get_settings())
