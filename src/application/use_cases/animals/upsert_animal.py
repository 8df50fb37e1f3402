from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime

from src.application.errors import ValidationError
from src.application.interfaces.repositories.animals import AnimalRepository
from src.domain.models.animal import (
    DATE_FIELDS,
    NUMERIC_FIELDS,
    TEXT_FIELDS,
    Animal,
    new_animal_id,
)
from src.domain.value_objects.animal_type import AnimalType
from src.domain.value_objects.sex import Sex
from src.utils.datetime_tz import parse_date, truncate_to_millis, utc_now


@dataclass(slots=True)
class UpsertAnimalInput:
    tag: str
    type: AnimalType | str
    sex: Sex | str
    id: str | None = None
    version: int | None = None
    breed: str | None = None
    origin: str | None = None
    lot: str | None = None
    pasture: str | None = None
    supplier: str | None = None
    buyer: str | None = None
    # Lineage
    sire_tag: str | None = None
    dam_tag: str | None = None
    purchase_date: date | str | None = None
    birth_date: date | str | None = None
    weaning_date: date | str | None = None
    sale_date: date | str | None = None
    pasture_start_date: date | str | None = None
    confinement_start_date: date | str | None = None
    weight_kg: float | None = None
    price_value: float | None = None
    cause_mortis: str | None = None
    notes: str | None = None


def _text(value: str | None) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _number(name: str, value) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{name} must be a number") from exc
    if not math.isfinite(number):
        raise ValidationError(f"{name} must be a finite number")
    return number


def build_animal(payload: UpsertAnimalInput, now: datetime) -> Animal:
    """Validate `payload` and normalize it into the record to persist.

    Raises ValidationError before anything reaches a backend.
    """
    tag = (payload.tag or "").strip()
    if not tag:
        raise ValidationError("tag is required")
    try:
        animal_type = AnimalType.parse(payload.type)
    except ValueError as exc:
        raise ValidationError(f"Invalid animal type: {payload.type!r}") from exc
    try:
        sex = Sex.parse(payload.sex)
    except ValueError as exc:
        raise ValidationError(f"Invalid sex: {payload.sex!r}") from exc
    if payload.version is not None and (
        isinstance(payload.version, bool) or not isinstance(payload.version, int)
        or payload.version < 0
    ):
        raise ValidationError("Invalid version value")

    values: dict = {}
    for name in TEXT_FIELDS:
        values[name] = _text(getattr(payload, name))
    for name in DATE_FIELDS:
        try:
            values[name] = parse_date(getattr(payload, name))
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"{name} must be an ISO date (YYYY-MM-DD)") from exc
    for name in NUMERIC_FIELDS:
        values[name] = _number(name, getattr(payload, name))

    return Animal(
        id=_text(payload.id) or new_animal_id(),
        tag=tag,
        type=animal_type,
        sex=sex,
        updated_at=truncate_to_millis(now),
        version=(payload.version or 0) + 1,
        **values,
    )


async def execute(
    repo: AnimalRepository,
    payload: UpsertAnimalInput,
    *,
    clock: Callable[[], datetime] = utc_now,
) -> Animal:
    animal = build_animal(payload, clock())
    return await repo.save(animal, expected_version=payload.version)
