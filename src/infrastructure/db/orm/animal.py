from __future__ import annotations

from sqlalchemy import REAL, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.db.base import Base


class AnimalORM(Base):
    """Row shape of the `animals` table.

    Column names stay camelCase so stores written by earlier app builds keep
    working. Dates and timestamps are ISO 8601 text.
    """

    __tablename__ = "animals"
    __table_args__ = (Index("ix_animals_updated_at", "updatedAt"),)

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    tag: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    sex: Mapped[str] = mapped_column(Text, nullable=False)
    breed: Mapped[str | None] = mapped_column(Text, nullable=True)
    origin: Mapped[str | None] = mapped_column(Text, nullable=True)
    lot: Mapped[str | None] = mapped_column(Text, nullable=True)
    pasture: Mapped[str | None] = mapped_column(Text, nullable=True)
    supplier: Mapped[str | None] = mapped_column(Text, nullable=True)
    buyer: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Lineage
    sire_tag: Mapped[str | None] = mapped_column("sireTag", Text, nullable=True)
    dam_tag: Mapped[str | None] = mapped_column("damTag", Text, nullable=True)

    purchase_date: Mapped[str | None] = mapped_column("purchaseDate", Text, nullable=True)
    birth_date: Mapped[str | None] = mapped_column("birthDate", Text, nullable=True)
    weaning_date: Mapped[str | None] = mapped_column("weaningDate", Text, nullable=True)
    sale_date: Mapped[str | None] = mapped_column("saleDate", Text, nullable=True)
    pasture_start_date: Mapped[str | None] = mapped_column(
        "pastureStartDate", Text, nullable=True
    )
    confinement_start_date: Mapped[str | None] = mapped_column(
        "confinementStartDate", Text, nullable=True
    )

    weight_kg: Mapped[float | None] = mapped_column("weightKg", REAL, nullable=True)
    price_value: Mapped[float | None] = mapped_column("priceValue", REAL, nullable=True)

    cause_mortis: Mapped[str | None] = mapped_column("causeMortis", Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    updated_at: Mapped[str] = mapped_column("updatedAt", Text, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
