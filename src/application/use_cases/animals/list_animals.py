from __future__ import annotations

from src.application.interfaces.repositories.animals import AnimalRepository
from src.domain.models.animal import Animal


async def execute(repo: AnimalRepository) -> list[Animal]:
    """All animals, most recently written first, ties broken by tag."""
    return await repo.list()
