from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from src.application.concurrency import next_version
from src.application.errors import ConflictError, ValidationError
from src.application.use_cases.animals import get_animal, list_animals, upsert_animal
from src.domain.models.animal import Animal
from src.domain.value_objects.animal_type import AnimalType
from src.domain.value_objects.sex import Sex

NOW = datetime(2025, 9, 4, 12, 34, 56, 789123, tzinfo=timezone.utc)


class StubRepo:
    def __init__(self) -> None:
        self.save_called = False
        self.saved = None
        self.expected_version = None
        self.get_called = False

    async def list(self):
        return []

    async def get(self, animal_id):
        self.get_called = True
        return None

    async def save(self, animal: Animal, expected_version):
        self.save_called = True
        self.saved = animal
        self.expected_version = expected_version
        return animal

    async def close(self):
        return None


def make_input(**overrides) -> upsert_animal.UpsertAnimalInput:
    values = {"tag": "A-001", "type": "CALF", "sex": "FEMALE"}
    values.update(overrides)
    return upsert_animal.UpsertAnimalInput(**values)


@pytest.mark.asyncio
async def test_upsert_assigns_id_and_normalizes_fields():
    repo = StubRepo()
    result = await upsert_animal.execute(
        repo,
        make_input(
            tag="  A-001 ",
            breed="  ",
            notes=" calm ",
            birth_date="2025-03-01",
            weight_kg=120,
        ),
        clock=lambda: NOW,
    )
    assert repo.save_called
    assert result.id
    assert result.tag == "A-001"
    assert result.type is AnimalType.CALF
    assert result.sex is Sex.FEMALE
    assert result.breed is None
    assert result.notes == "calm"
    assert result.birth_date == date(2025, 3, 1)
    assert result.weight_kg == 120.0
    assert result.updated_at == NOW.replace(microsecond=789000)
    assert repo.expected_version is None


@pytest.mark.asyncio
async def test_upsert_passes_supplied_id_and_version():
    repo = StubRepo()
    await upsert_animal.execute(repo, make_input(id="abc", version=3), clock=lambda: NOW)
    assert repo.saved.id == "abc"
    assert repo.expected_version == 3


@pytest.mark.asyncio
async def test_upsert_accepts_legacy_codes():
    repo = StubRepo()
    result = await upsert_animal.execute(repo, make_input(type="matriz", sex="M"))
    assert result.type is AnimalType.BREEDING_FEMALE
    assert result.sex is Sex.MALE


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"tag": ""},
        {"tag": "   "},
        {"type": "HORSE"},
        {"sex": "X"},
        {"birth_date": "04/09/2025"},
        {"weight_kg": "heavy"},
        {"price_value": True},
        {"weight_kg": float("inf")},
        {"weight_kg": float("nan")},
        {"price_value": "-inf"},
        {"birth_date": "2024-01-01garbage"},
        {"version": -1},
    ],
)
async def test_upsert_rejects_invalid_input_before_writing(overrides):
    repo = StubRepo()
    with pytest.raises(ValidationError):
        await upsert_animal.execute(repo, make_input(**overrides))
    assert not repo.save_called


@pytest.mark.asyncio
async def test_get_animal_with_empty_id_skips_repository():
    repo = StubRepo()
    assert await get_animal.execute(repo, "") is None
    assert not repo.get_called


@pytest.mark.asyncio
async def test_list_animals_empty():
    assert await list_animals.execute(StubRepo()) == []


def test_next_version_rules():
    assert next_version("a", None, None) == 1
    assert next_version("a", None, 0) == 1
    assert next_version("a", 4, None) == 5
    assert next_version("a", 4, 4) == 5


@pytest.mark.parametrize("current,expected", [(4, 3), (4, 0), (None, 2)])
def test_next_version_conflicts(current, expected):
    with pytest.raises(ConflictError) as excinfo:
        next_version("a", current, expected)
    assert excinfo.value.details == {
        "id": "a",
        "expected_version": expected,
        "current_version": current,
    }
