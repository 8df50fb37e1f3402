from __future__ import annotations

from enum import Enum


class Sex(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"

    @classmethod
    def parse(cls, value: Sex | str) -> Sex:
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper()
        # 'M'/'F' were stored by the first schema
        return cls({"M": "MALE", "F": "FEMALE"}.get(key, key))
