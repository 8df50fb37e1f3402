from __future__ import annotations

import logging

from sqlalchemy import Connection, inspect, text

from src.infrastructure.db.base import Base
from src.infrastructure.db.orm.animal import AnimalORM

logger = logging.getLogger(__name__)


def ensure_schema(connection: Connection) -> list[str]:
    """Create or additively migrate the `animals` table.

    Missing columns are added one at a time and always as nullable, so rows
    written by an older schema read NULL for them. Nothing is dropped or
    renamed. Returns the names of the columns that were added.
    """
    table = AnimalORM.__table__
    inspector = inspect(connection)
    if not inspector.has_table(table.name):
        Base.metadata.create_all(connection, tables=[table])
        logger.info("Created table %s", table.name)
        return []

    existing = {column["name"] for column in inspector.get_columns(table.name)}
    preparer = connection.dialect.identifier_preparer
    added: list[str] = []
    for column in table.columns:
        if column.name in existing:
            continue
        column_type = column.type.compile(dialect=connection.dialect)
        connection.execute(
            text(
                f"ALTER TABLE {preparer.quote(table.name)} "
                f"ADD COLUMN {preparer.quote(column.name)} {column_type}"
            )
        )
        added.append(column.name)
        logger.info("Added column %s.%s (%s)", table.name, column.name, column_type)

    for index in table.indexes:
        index.create(connection, checkfirst=True)
    return added
