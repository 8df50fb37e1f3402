from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import uuid4

from src.domain.value_objects.animal_type import AnimalType
from src.domain.value_objects.sex import Sex
from src.utils.datetime_tz import truncate_to_millis, utc_now

TEXT_FIELDS = (
    "breed",
    "origin",
    "lot",
    "pasture",
    "supplier",
    "buyer",
    "sire_tag",
    "dam_tag",
    "cause_mortis",
    "notes",
)
DATE_FIELDS = (
    "purchase_date",
    "birth_date",
    "weaning_date",
    "sale_date",
    "pasture_start_date",
    "confinement_start_date",
)
NUMERIC_FIELDS = ("weight_kg", "price_value")
OPTIONAL_FIELDS = TEXT_FIELDS + DATE_FIELDS + NUMERIC_FIELDS


def new_animal_id() -> str:
    return str(uuid4())


@dataclass(slots=True)
class Animal:
    id: str
    tag: str
    # None only for rows migrated from a store that predates the column
    type: AnimalType | None
    sex: Sex | None

    breed: str | None = None
    origin: str | None = None
    lot: str | None = None
    pasture: str | None = None
    supplier: str | None = None
    buyer: str | None = None

    # Lineage
    sire_tag: str | None = None
    dam_tag: str | None = None

    purchase_date: date | None = None
    birth_date: date | None = None
    weaning_date: date | None = None
    sale_date: date | None = None
    pasture_start_date: date | None = None
    confinement_start_date: date | None = None

    weight_kg: float | None = None
    price_value: float | None = None

    cause_mortis: str | None = None
    notes: str | None = None

    updated_at: datetime = field(default_factory=lambda: truncate_to_millis(utc_now()))
    version: int = 1

