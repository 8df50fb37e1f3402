from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from src.application.concurrency import next_version
from src.application.interfaces.repositories.animals import AnimalRepository
from src.domain.models.animal import Animal
from src.infrastructure.repos.animal_document import AnimalDocument, AnimalDocumentList
from src.infrastructure.storage.ports import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "pvf.animals"

_RecordList = TypeAdapter(list[dict[str, Any]])


class AnimalsBlobRepository(AnimalRepository):
    """Whole herd serialized as one JSON array under a single key.

    Every read parses the full collection and every write rewrites it, which
    only makes sense for the small single-user herds this store targets.
    """

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.store = store
        self.key = key
        self._lock = asyncio.Lock()

    async def _load(self) -> tuple[list[Animal], list[dict[str, Any]]]:
        """Return the readable animals and the raw records that failed validation.

        Unreadable records are carried through writes untouched so that one
        bad entry never costs the rest of the herd.
        """
        try:
            raw = await self.store.get_item(self.key)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read %s, treating herd as empty: %s", self.key, exc)
            return [], []
        if not raw:
            return [], []
        try:
            records = _RecordList.validate_json(raw)
        except PydanticValidationError as exc:
            logger.warning(
                "Stored %s is not a JSON array of records (%d errors), treating herd as empty",
                self.key,
                exc.error_count(),
            )
            return [], []
        animals: list[Animal] = []
        unreadable: list[dict[str, Any]] = []
        for position, record in enumerate(records):
            try:
                animals.append(AnimalDocument.model_validate(record).to_domain())
            except PydanticValidationError as exc:
                logger.warning(
                    "Skipping unreadable record %d of %s (id=%r): %d errors",
                    position,
                    self.key,
                    record.get("id"),
                    exc.error_count(),
                )
                unreadable.append(record)
        return animals, unreadable

    async def _write(self, animals: list[Animal], unreadable: list[dict[str, Any]]) -> None:
        records = AnimalDocumentList.dump_python(
            [AnimalDocument.from_domain(animal) for animal in animals],
            mode="json",
            by_alias=True,
            exclude_none=True,
        )
        payload = _RecordList.dump_json(records + unreadable).decode("utf-8")
        try:
            await self.store.set_item(self.key, payload)
        except Exception:
            # Best-effort write: the caller still gets the record it asked for
            logger.warning(
                "Failed to persist %s (%d animals)", self.key, len(animals), exc_info=True
            )

    async def list(self) -> list[Animal]:
        animals, _ = await self._load()
        animals.sort(key=lambda animal: animal.tag)
        animals.sort(key=lambda animal: animal.updated_at, reverse=True)
        return animals

    async def get(self, animal_id: str) -> Animal | None:
        animals, _ = await self._load()
        for animal in animals:
            if animal.id == animal_id:
                return animal
        return None

    async def save(self, animal: Animal, expected_version: int | None) -> Animal:
        async with self._lock:
            animals, unreadable = await self._load()
            # A valid write supersedes an unreadable record with the same id
            unreadable = [record for record in unreadable if record.get("id") != animal.id]
            index = next((i for i, item in enumerate(animals) if item.id == animal.id), None)
            current = animals[index].version if index is not None else None
            entity = replace(animal, version=next_version(animal.id, current, expected_version))
            if index is None:
                animals.insert(0, entity)
            else:
                animals[index] = entity
            await self._write(animals, unreadable)
        return entity

    async def close(self) -> None:
        return None
