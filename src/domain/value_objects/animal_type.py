from __future__ import annotations

from enum import Enum


class AnimalType(str, Enum):
    CALF = "CALF"
    YEARLING = "YEARLING"
    BREEDING_FEMALE = "BREEDING_FEMALE"
    FEEDLOT = "FEEDLOT"

    @classmethod
    def parse(cls, value: AnimalType | str) -> AnimalType:
        """Accept canonical names and the Portuguese codes of early app builds."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper()
        return cls(_LEGACY_CODES.get(key, key))


_LEGACY_CODES = {
    "BEZERRO": "CALF",
    "NOVILHO": "YEARLING",
    "MATRIZ": "BREEDING_FEMALE",
    "ENGORDA": "FEEDLOT",
}
