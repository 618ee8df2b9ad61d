from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

FILES_PATH = "/api/files"


class ApiError(Exception):
    """A files API call failed. `status_code` is 0 when no response arrived."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}" if status_code else message)


class FilesApiClient:
    """
    Speaks the /api/files protocol over an httpx.AsyncClient.

    The caller owns the client (base_url, transport, timeouts).
    """

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def _request(self, method: str, *, params: dict[str, str] | None = None, json: Any = None) -> dict[str, Any]:
        try:
            resp = await self._client.request(method, FILES_PATH, params=params, json=json)
        except httpx.HTTPError as e:
            logger.info("FILES CLIENT: %s failed: %r", method, e)
            raise ApiError(0, str(e) or type(e).__name__) from e

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if resp.is_error:
            message = data.get("error") if isinstance(data.get("error"), str) else None
            raise ApiError(resp.status_code, message or "Unknown error")
        return data

    async def list_files(self) -> dict[str, str]:
        data = await self._request("GET")
        files = data.get("files")
        return dict(files) if isinstance(files, dict) else {}

    async def put_file(self, filename: str, content: str, access_code: str) -> str:
        data = await self._request(
            "POST",
            json={"filename": filename, "content": content, "accessCode": access_code},
        )
        return str(data.get("filename", filename))

    async def delete_file(self, filename: str, access_code: str) -> str:
        data = await self._request(
            "DELETE",
            params={"filename": filename},
            json={"accessCode": access_code},
        )
        return str(data.get("filename", filename))
