from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date, datetime

from pydantic import (
    BaseModel,
    ConfigDict,
    TypeAdapter,
    ValidationInfo,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_camel

from src.domain.models.animal import DATE_FIELDS, Animal
from src.domain.value_objects.animal_type import AnimalType
from src.domain.value_objects.sex import Sex
from src.utils.datetime_tz import format_timestamp, parse_date, parse_timestamp

logger = logging.getLogger(__name__)


class AnimalDocument(BaseModel):
    """JSON shape of an animal: camelCase keys, ISO dates, absent optionals omitted."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    tag: str
    type: AnimalType | None = None
    sex: Sex | None = None
    breed: str | None = None
    origin: str | None = None
    lot: str | None = None
    pasture: str | None = None
    supplier: str | None = None
    buyer: str | None = None
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
    updated_at: datetime
    version: int = 1

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, value):
        return AnimalType.parse(value) if value not in (None, "") else None

    @field_validator("sex", mode="before")
    @classmethod
    def parse_sex(cls, value):
        return Sex.parse(value) if value not in (None, "") else None

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def parse_dates(cls, value, info: ValidationInfo):
        if not isinstance(value, str):
            return value
        try:
            return parse_date(value)
        except ValueError:
            logger.warning("Ignoring unparseable %s=%r in stored animal", info.field_name, value)
            return None

    @field_validator("updated_at", mode="before")
    @classmethod
    def parse_updated_at(cls, value):
        return parse_timestamp(value) if isinstance(value, str) else value

    @field_serializer("updated_at", when_used="json")
    def serialize_updated_at(self, value: datetime) -> str:
        return format_timestamp(value)

    @classmethod
    def from_domain(cls, animal: Animal) -> AnimalDocument:
        return cls.model_validate(asdict(animal))

    def to_domain(self) -> Animal:
        return Animal(**self.model_dump())


AnimalDocumentList = TypeAdapter(list[AnimalDocument])
