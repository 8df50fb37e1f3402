from __future__ import annotations

import logging

from src.application.errors import ConflictError

logger = logging.getLogger(__name__)


def next_version(animal_id: str, current: int | None, expected: int | None) -> int:
    """Version the next write of `animal_id` gets, or ConflictError.

    `current` is the stored version (None when the record does not exist).
    `expected` is the version the caller last read; None skips the check and
    overwrites whatever is stored.
    """
    if expected is not None and expected != (current or 0):
        raise version_conflict(animal_id, expected, current)
    return (current or 0) + 1


def version_conflict(animal_id: str, expected: int | None, current: int | None) -> ConflictError:
    logger.info(
        "Version conflict on animal %s: expected=%s current=%s", animal_id, expected, current
    )
    return ConflictError(
        "Version mismatch while saving animal",
        details={"id": animal_id, "expected_version": expected, "current_version": current},
    )
