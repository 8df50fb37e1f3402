from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.concurrency import version_conflict
from src.application.interfaces.repositories.animals import AnimalRepository
from src.domain.models.animal import DATE_FIELDS, NUMERIC_FIELDS, TEXT_FIELDS, Animal
from src.domain.value_objects.animal_type import AnimalType
from src.domain.value_objects.sex import Sex
from src.infrastructure.db.orm.animal import AnimalORM
from src.infrastructure.db.session import Database
from src.utils.datetime_tz import format_timestamp, parse_date, parse_timestamp

logger = logging.getLogger(__name__)


class AnimalsSQLAlchemyRepository(AnimalRepository):
    def __init__(self, db: Database) -> None:
        self.db = db

    def _to_domain(self, orm: AnimalORM) -> Animal:
        values: dict = {name: getattr(orm, name) for name in TEXT_FIELDS + NUMERIC_FIELDS}
        for name in DATE_FIELDS:
            raw = getattr(orm, name)
            try:
                values[name] = parse_date(raw)
            except ValueError:
                logger.warning("Ignoring unparseable %s=%r on animal %s", name, raw, orm.id)
                values[name] = None
        return Animal(
            id=orm.id,
            tag=orm.tag,
            type=_enum_or_none(AnimalType, orm.type, orm.id),
            sex=_enum_or_none(Sex, orm.sex, orm.id),
            updated_at=parse_timestamp(orm.updated_at),
            version=orm.version,
            **values,
        )

    def _to_values(self, animal: Animal) -> dict:
        values: dict = {
            AnimalORM.tag: animal.tag,
            AnimalORM.type: animal.type.value if animal.type else None,
            AnimalORM.sex: animal.sex.value if animal.sex else None,
            AnimalORM.updated_at: format_timestamp(animal.updated_at),
        }
        for name in TEXT_FIELDS + NUMERIC_FIELDS:
            values[getattr(AnimalORM, name)] = getattr(animal, name)
        for name in DATE_FIELDS:
            value = getattr(animal, name)
            values[getattr(AnimalORM, name)] = value.isoformat() if value else None
        return values

    async def list(self) -> list[Animal]:
        await self.db.ready()
        stmt = select(AnimalORM).order_by(AnimalORM.updated_at.desc(), AnimalORM.tag.asc())
        async with self.db.session_factory() as session:
            result = await session.execute(stmt)
            rows = result.scalars().all()
        return [self._to_domain(row) for row in rows]

    async def get(self, animal_id: str) -> Animal | None:
        await self.db.ready()
        async with self.db.session_factory() as session:
            orm = await session.get(AnimalORM, animal_id)
            return self._to_domain(orm) if orm else None

    async def save(self, animal: Animal, expected_version: int | None) -> Animal:
        await self.db.ready()
        values = self._to_values(animal)
        stmt = update(AnimalORM).where(AnimalORM.id == animal.id)
        if expected_version is not None:
            stmt = stmt.where(AnimalORM.version == expected_version)
        stmt = stmt.values({**values, AnimalORM.version: AnimalORM.version + 1}).returning(
            AnimalORM
        )
        async with self.db.session_factory() as session:
            result = await session.execute(stmt)
            orm = result.scalar_one_or_none()
            if orm is None:
                if expected_version:
                    current = await self._current_version(session, animal.id)
                    await session.rollback()
                    raise version_conflict(animal.id, expected_version, current)
                orm = AnimalORM(id=animal.id, version=1)
                for attr, value in values.items():
                    setattr(orm, attr.key, value)
                session.add(orm)
                try:
                    await session.flush()
                except IntegrityError as exc:
                    await session.rollback()
                    current = await self._current_version(session, animal.id)
                    if current is None:
                        # Not a duplicate id, e.g. a NOT NULL column left by an older schema
                        raise
                    # Row exists: either expected_version=0 or a concurrent create
                    raise version_conflict(animal.id, expected_version, current) from exc
            await session.commit()
        return self._to_domain(orm)

    async def close(self) -> None:
        await self.db.dispose()

    async def _current_version(self, session: AsyncSession, animal_id: str) -> int | None:
        result = await session.execute(
            select(AnimalORM.version).where(AnimalORM.id == animal_id)
        )
        return result.scalar_one_or_none()


def _enum_or_none(enum_cls, raw: str | None, animal_id: str):
    if raw is None:
        return None
    try:
        return enum_cls.parse(raw)
    except ValueError:
        logger.warning("Unknown %s %r on animal %s", enum_cls.__name__, raw, animal_id)
        return None
