from __future__ import annotations

import threading
from pathlib import Path


class KeyLockRegistry:
    """
    Hands out one stable lock per store key (or per resolved file path),
    so writers to different keys never contend.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, key: str | Path) -> threading.Lock:
        name = str(key.resolve()) if isinstance(key, Path) else key
        with self._guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = threading.Lock()
                self._locks[name] = lock
            return lock


# Disk files may be shared by several store instances in one process.
GLOBAL_PATH_LOCKS = KeyLockRegistry()
