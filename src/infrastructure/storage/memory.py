from __future__ import annotations

from dataclasses import dataclass, field

from src.infrastructure.storage.ports import KeyValueStore


@dataclass(slots=True)
class MemoryKeyValueStore(KeyValueStore):
    items: dict[str, str] = field(default_factory=dict)

    async def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.items[key] = value
