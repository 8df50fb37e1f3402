from __future__ import annotations

import asyncio
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

from src.infrastructure.storage.ports import KeyValueStore


@dataclass(slots=True)
class FileKeyValueStore(KeyValueStore):
    """One UTF-8 file per key under `directory`.

    Writes go to a temporary sibling first and are swapped in with
    os.replace, so readers never see a half-written value.
    """

    directory: str | Path

    def _path(self, key: str) -> Path:
        return Path(self.directory) / f"{quote(key, safe='.-_')}.json"

    async def get_item(self, key: str) -> str | None:
        return await asyncio.to_thread(self._read, self._path(key))

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, self._path(key), value)

    @staticmethod
    def _read(path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    @staticmethod
    def _write(path: Path, value: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
