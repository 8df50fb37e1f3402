from __future__ import annotations

from typing import Protocol

from src.domain.models.animal import Animal


class AnimalRepository(Protocol):
    async def list(self) -> list[Animal]: ...

    async def get(self, animal_id: str) -> Animal | None: ...

    async def save(self, animal: Animal, expected_version: int | None) -> Animal:
        """Insert or fully replace `animal`, assigning the next version.

        `animal.version` is ignored; the stored record decides it. When
        `expected_version` is given it must match the stored version (0 for a
        record that does not exist yet), otherwise ConflictError is raised.
        """
        ...

    async def close(self) -> None: ...
