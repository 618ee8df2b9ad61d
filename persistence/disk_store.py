from __future__ import annotations

from pathlib import Path
from typing import Any

from json_store import atomic_write_json, read_json

from .interfaces import KeyValueStore
from .locks import GLOBAL_PATH_LOCKS
from .paths import key_filename, kv_dir


class DiskKeyValueStore(KeyValueStore):
    """
    Stores each key as one JSON file under `<data_dir>/kv/`.

    - Missing or empty files read as None.
    - Writes are atomic (temp file then replace), serialized per path.
    """

    def __init__(self, data_dir: Path):
        self._dir = kv_dir(data_dir)

    @property
    def directory(self) -> Path:
        return self._dir

    def path_for(self, key: str) -> Path:
        return self._dir / key_filename(key)

    def get(self, key: str) -> Any | None:
        path = self.path_for(key)
        with GLOBAL_PATH_LOCKS.lock_for(path):
            return read_json(path)

    def set(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        with GLOBAL_PATH_LOCKS.lock_for(path):
            atomic_write_json(path, value)
