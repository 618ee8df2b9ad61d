from __future__ import annotations

from typing import Any, Protocol


class KeyValueStore(Protocol):
    """
    Minimal backing-store interface: JSON-like values persisted under string keys.

    Each call is atomic for its own key. Nothing spans two calls.
    """

    def get(self, key: str) -> Any | None:
        """Return the value stored under `key`, or None when absent."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Persist `value` under `key`, replacing any previous value."""
        ...
