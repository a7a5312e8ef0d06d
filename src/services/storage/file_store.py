"""JSON-file post store used in development."""

import asyncio
import json
from pathlib import Path

from src.services.storage.base import BasePostStore


class FilePostStore(BasePostStore):
    """Stores the post list as a pretty-printed JSON array on disk.

    Args:
        path: Location of the JSON file. Parent directories are created
            on first write.
        seed: Initialize a missing file with the demo posts.
    """

    def __init__(self, path: str | Path, seed: bool = True) -> None:
        super().__init__(seed=seed)
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_sync(self) -> list[dict] | None:
        if not self._path.is_file():
            return None
        with open(self._path, encoding="utf-8") as f:
            return json.load(f)

    def _write_sync(self, documents: list[dict]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(documents, f, indent=2)

    async def _read(self) -> list[dict] | None:
        return await asyncio.to_thread(self._read_sync)

    async def _write(self, documents: list[dict]) -> None:
        await asyncio.to_thread(self._write_sync, documents)
