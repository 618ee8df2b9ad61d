from __future__ import annotations

import hmac
import logging
from typing import Any

from errors import (
    DocumentStoreError,
    InvalidInputError,
    MethodNotSupportedError,
    NotFoundError,
    StoreUnavailableError,
    UnauthorizedError,
)
from persistence.repositories import AsyncFileRepository

logger = logging.getLogger(__name__)


def _valid_filename(value: Any) -> str | None:
    if not isinstance(value, str) or not value:
        return None
    return value


class DocumentStoreService:
    """
    List / create-or-update / delete over the shared document collection.

    Reads are open to everyone. Every mutation must carry the configured access
    code; an empty configured code locks all mutations.
    """

    def __init__(self, repo: AsyncFileRepository, access_code: str):
        self._repo = repo
        self._access_code = access_code or ""

    def _check_access(self, supplied: Any) -> None:
        if not isinstance(supplied, str) or not supplied or not self._access_code:
            raise UnauthorizedError()
        if not hmac.compare_digest(supplied.encode("utf-8"), self._access_code.encode("utf-8")):
            raise UnauthorizedError()

    async def _guard_store(self, coro):
        try:
            return await coro
        except StoreUnavailableError as e:
            # Upstream detail stays in the log; callers get the generic message.
            logger.exception("KV API error: %s", e.message)
            raise StoreUnavailableError() from e
        except DocumentStoreError:
            raise
        except Exception as e:
            logger.exception("KV API error: %r", e)
            raise StoreUnavailableError() from e

    async def list_files(self) -> dict[str, str]:
        return await self._guard_store(self._repo.list_files())

    async def put_file(self, filename: Any, content: Any, access_code: Any) -> str:
        self._check_access(access_code)
        name = _valid_filename(filename)
        if name is None:
            raise InvalidInputError("Filename is required")
        if content is None:
            raise InvalidInputError("Content is required")
        if not isinstance(content, str):
            raise InvalidInputError("Content must be text")

        await self._guard_store(self._repo.put_file(name, content))
        logger.info("File saved: %s (%d chars)", name, len(content))
        return name

    async def delete_file(self, filename: Any, access_code: Any) -> str:
        self._check_access(access_code)
        name = _valid_filename(filename)
        if name is None:
            raise InvalidInputError("Filename is required")

        removed = await self._guard_store(self._repo.delete_file(name))
        if not removed:
            raise NotFoundError()
        logger.info("File deleted: %s", name)
        return name

    async def dispatch(self, operation: str, **params: Any) -> Any:
        """Run an operation by name; unknown names raise MethodNotSupportedError."""
        op = (operation or "").strip().lower()
        if op == "list":
            return await self.list_files()
        if op == "put":
            return await self.put_file(params.get("filename"), params.get("content"), params.get("access_code"))
        if op == "delete":
            return await self.delete_file(params.get("filename"), params.get("access_code"))
        raise MethodNotSupportedError()
