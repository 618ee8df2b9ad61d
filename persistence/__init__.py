from __future__ import annotations

from .collection import FILES_KEY, CollectionDecodeError, FileCollection
from .disk_store import DiskKeyValueStore
from .interfaces import KeyValueStore
from .memory_store import InMemoryKeyValueStore
from .repositories import AsyncFileRepository, AsyncKeyValueFileRepository
from .rest_store import RestKeyValueStore

__all__ = [
    "FILES_KEY",
    "CollectionDecodeError",
    "FileCollection",
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "DiskKeyValueStore",
    "RestKeyValueStore",
    "AsyncFileRepository",
    "AsyncKeyValueFileRepository",
]
