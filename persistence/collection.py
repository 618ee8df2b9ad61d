from __future__ import annotations

import json
from typing import Any, Mapping

from pydantic import RootModel, ValidationError

# Every document lives inside one value stored under this key.
FILES_KEY = "files"


class CollectionDecodeError(ValueError):
    """The stored value is present but is not a filename -> content mapping."""


class FileCollection(RootModel[dict[str, str]]):
    """
    Mirrors the stored blob exactly:
      { "<filename>": "<content>", ... }
    """

    @classmethod
    def from_store_value(cls, raw: Any) -> "FileCollection":
        if raw is None:
            return cls({})
        if isinstance(raw, (str, bytes)):
            try:
                raw = json.loads(raw)
            except ValueError as e:
                raise CollectionDecodeError("stored collection is not valid JSON") from e
            if raw is None:
                return cls({})
        if not isinstance(raw, Mapping):
            raise CollectionDecodeError(f"stored collection is a {type(raw).__name__}, expected an object")
        try:
            return cls.model_validate(dict(raw), strict=True)
        except ValidationError as e:
            raise CollectionDecodeError(f"stored collection has invalid entries: {e.error_count()} error(s)") from e

    def to_store_value(self) -> dict[str, str]:
        return dict(self.root)


def decode(raw: Any) -> dict[str, str]:
    """Stored value -> in-memory collection. Absent (None) is the empty collection."""
    return FileCollection.from_store_value(raw).to_store_value()


def encode(collection: Mapping[str, str]) -> dict[str, str]:
    return {str(name): content for name, content in collection.items()}


__all__ = ["FILES_KEY", "CollectionDecodeError", "FileCollection", "decode", "encode"]
