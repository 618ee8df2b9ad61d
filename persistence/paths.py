from __future__ import annotations

from pathlib import Path


def project_root() -> Path:
    # persistence/paths.py -> persistence -> project root
    return Path(__file__).resolve().parents[1]


def default_data_dir() -> Path:
    return project_root() / "data"


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def kv_dir(data_dir: Path) -> Path:
    return ensure_dir(data_dir / "kv")


def key_filename(key: str) -> str:
    """Map a store key onto a single safe file name."""
    safe = "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in key.strip())
    return f"{safe or '_'}.json"
