from __future__ import annotations

import asyncio
import contextlib
import weakref
from typing import AsyncIterator, Protocol

from .collection import FILES_KEY, decode, encode
from .interfaces import KeyValueStore


class AsyncFileRepository(Protocol):
    """
    Domain-level document persistence interface.
    Callers see one document at a time; storage granularity is an implementation detail.
    """

    async def list_files(self) -> dict[str, str]: ...

    async def put_file(self, filename: str, content: str) -> None: ...

    async def delete_file(self, filename: str) -> bool: ...


class AsyncKeyValueFileRepository(AsyncFileRepository):
    """
    Key-value backed FileRepository.

    Implementation detail: the whole collection is one blob under FILES_KEY, so
    every mutation loads it, changes one entry and saves it back. Two mutations
    running at the same time can lose one of the updates (last writer wins).
    With `serialize_mutations=True` mutations issued through this repository are
    queued behind an asyncio.Lock (one per event loop, created on first use);
    other processes sharing the store can still race.

    Blocking store calls run in asyncio.to_thread to keep the event loop free.
    """

    def __init__(self, store: KeyValueStore, *, serialize_mutations: bool = False) -> None:
        self._store = store
        self._serialize = serialize_mutations
        self._mutation_locks: weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock] = (
            weakref.WeakKeyDictionary()
        )

    @property
    def serializes_mutations(self) -> bool:
        return self._serialize

    async def _load(self) -> dict[str, str]:
        raw = await asyncio.to_thread(self._store.get, FILES_KEY)
        return decode(raw)

    async def _save(self, files: dict[str, str]) -> None:
        await asyncio.to_thread(self._store.set, FILES_KEY, encode(files))

    @contextlib.asynccontextmanager
    async def _mutation(self) -> AsyncIterator[None]:
        if not self._serialize:
            yield
            return
        loop = asyncio.get_running_loop()
        lock = self._mutation_locks.get(loop)
        if lock is None:
            lock = self._mutation_locks[loop] = asyncio.Lock()
        async with lock:
            yield

    async def list_files(self) -> dict[str, str]:
        return await self._load()

    async def put_file(self, filename: str, content: str) -> None:
        async with self._mutation():
            files = await self._load()
            files[filename] = content
            await self._save(files)

    async def delete_file(self, filename: str) -> bool:
        async with self._mutation():
            files = await self._load()
            if filename not in files:
                return False
            del files[filename]
            await self._save(files)
            return True
