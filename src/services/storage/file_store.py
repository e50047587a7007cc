"""
Local File Storage Implementation

DESIGN DECISION: Each key is a single file inside a data directory.
This is the default backend because:
1. No external service or credentials required
2. Data is plain JSON and easy to inspect or back up
3. os.replace gives us an atomic swap of the whole snapshot

TRADEOFFS:
- One writer process per directory (no cross-process locking)
- Whole-file rewrite on every change (fine for personal ledgers)
"""

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from src.services.storage.interface import KeyValueStore, StorageError


class FileKeyValueStore(KeyValueStore):
    """
    Stores each key as `<directory>/<percent-encoded key>.json`.
    """

    def __init__(self, directory: Path | str):
        self._directory = Path(directory).expanduser()

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        return self._directory / f"{quote(key, safe='')}.json"

    def _read(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def _write(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._directory,
                prefix=".tmp-",
                suffix=".json",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(value)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                # Leave the previous snapshot in place
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, key, value)
