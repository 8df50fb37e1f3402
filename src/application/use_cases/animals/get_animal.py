from __future__ import annotations

from src.application.interfaces.repositories.animals import AnimalRepository
from src.domain.models.animal import Animal


async def execute(repo: AnimalRepository, animal_id: str) -> Animal | None:
    if not animal_id:
        return None
    return await repo.get(animal_id)
