from __future__ import annotations

from typing import Protocol


class KeyValueStore(Protocol):
    """Flat string-to-string storage, the shape of a browser's localStorage."""

    async def get_item(self, key: str) -> str | None: ...

    async def set_item(self, key: str, value: str) -> None: ...
