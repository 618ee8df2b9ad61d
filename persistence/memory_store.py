from __future__ import annotations

import json
from typing import Any

from .interfaces import KeyValueStore
from .locks import KeyLockRegistry


def _detached(value: Any) -> Any:
    # JSON round trip: rejects non-JSON values and never shares nested objects with callers.
    return json.loads(json.dumps(value))


class InMemoryKeyValueStore(KeyValueStore):
    """
    Process-local key-value store.

    Values are copied on the way in and on the way out, so mutating a value
    returned by `get` never changes what is stored.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._locks = KeyLockRegistry()
        self._data: dict[str, Any] = {k: _detached(v) for k, v in (initial or {}).items()}

    def get(self, key: str) -> Any | None:
        with self._locks.lock_for(key):
            if key not in self._data:
                return None
            return _detached(self._data[key])

    def set(self, key: str, value: Any) -> None:
        copy = _detached(value)
        with self._locks.lock_for(key):
            self._data[key] = copy

    def raw(self, key: str) -> str | None:
        """Serialized snapshot of a key, for byte-level comparisons."""
        with self._locks.lock_for(key):
            if key not in self._data:
                return None
            return json.dumps(self._data[key], sort_keys=True)
