from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any


def read_json(path: Path) -> Any | None:
    """
    Read a JSON value from disk.

    Returns None for missing or empty files. Invalid JSON raises ValueError
    so a damaged file is reported instead of being read as "no data".
    """
    if not path.exists():
        return None
    raw = path.read_text(encoding="utf-8")
    if not raw.strip():
        return None
    return json.loads(raw)


def atomic_write_json(path: Path, payload: Any, *, indent: int = 2, sort_keys: bool = True) -> None:
    """
    Atomically write JSON to disk by writing to a temp file then replacing.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + f".{os.getpid()}.tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=indent, sort_keys=sort_keys, ensure_ascii=False)
        f.write("\n")
    tmp_path.replace(path)
