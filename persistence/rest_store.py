from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import quote

import httpx

from errors import StoreUnavailableError

from .interfaces import KeyValueStore

logger = logging.getLogger(__name__)


class RestKeyValueStore(KeyValueStore):
    """
    Key-value store reached over a Redis-style REST API.

      GET  {base_url}/get/{key}  -> {"result": "<json text>" | null}
      POST {base_url}/set/{key}  body: <json text>  -> {"result": "OK"}

    Values are JSON-encoded before they are sent and decoded when read back.
    Any transport failure or error response raises StoreUnavailableError.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        client: httpx.Client | None = None,
        timeout: float = 10.0,
    ):
        if not base_url:
            raise ValueError("REST store requires a base URL")
        if not token:
            raise ValueError("REST store requires an API token")
        self._base_url = base_url.rstrip("/")
        self._headers = {"Authorization": f"Bearer {token}"}
        self._client = client or httpx.Client(timeout=timeout)

    def _url(self, op: str, key: str) -> str:
        return f"{self._base_url}/{op}/{quote(key, safe='')}"

    def _send(self, method: str, url: str, *, content: str | None = None) -> Any:
        try:
            resp = self._client.request(method, url, headers=self._headers, content=content)
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPStatusError as e:
            logger.warning("KV REST: %s %s -> %s", method, url, e.response.status_code)
            raise StoreUnavailableError(f"KV REST request failed with status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("KV REST: %s %s failed: %r", method, url, e)
            raise StoreUnavailableError("KV REST request failed") from e
        except ValueError as e:
            raise StoreUnavailableError("KV REST response was not JSON") from e
        if not isinstance(payload, dict):
            raise StoreUnavailableError("KV REST response had an unexpected shape")
        if payload.get("error"):
            raise StoreUnavailableError(f"KV REST error: {payload['error']}")
        return payload.get("result")

    def get(self, key: str) -> Any | None:
        result = self._send("GET", self._url("get", key))
        if result is None:
            return None
        if isinstance(result, str):
            try:
                return json.loads(result)
            except ValueError:
                # Plain strings written by other clients are returned as-is.
                return result
        return result

    def set(self, key: str, value: Any) -> None:
        self._send("POST", self._url("set", key), content=json.dumps(value))

    def close(self) -> None:
        self._client.close()
