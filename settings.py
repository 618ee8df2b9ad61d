from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from persistence.paths import default_data_dir

KV_BACKENDS = ("memory", "disk", "rest")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Shared secret that unlocks create/update/delete
    access_code: str

    # Backing store
    kv_backend: str
    data_dir: Path
    kv_rest_api_url: str
    kv_rest_api_token: str

    # Concurrency: queue mutations behind an in-process lock
    serialize_mutations: bool

    # Logging / debug
    log_level: str
    debug_log_requests: bool


def get_settings() -> Settings:
    # NOTE: no default secret; writes stay locked until ACCESS_CODE is set
    access_code = os.getenv("ACCESS_CODE", "")

    # Serverless filesystems are ephemeral; default to memory unless told otherwise.
    kv_backend = os.getenv("KV_BACKEND", "memory").strip().lower()
    if kv_backend not in KV_BACKENDS:
        raise ValueError(f"KV_BACKEND must be one of {list(KV_BACKENDS)}, got {kv_backend!r}")

    data_dir_raw = os.getenv("DATA_DIR", "").strip()
    data_dir = Path(data_dir_raw) if data_dir_raw else default_data_dir()

    kv_rest_api_url = os.getenv("KV_REST_API_URL", "").strip().rstrip("/")
    kv_rest_api_token = os.getenv("KV_REST_API_TOKEN", "").strip()
    if kv_backend == "rest" and not (kv_rest_api_url and kv_rest_api_token):
        raise ValueError("KV_BACKEND=rest requires KV_REST_API_URL and KV_REST_API_TOKEN")

    serialize_mutations = _env_bool("SERIALIZE_MUTATIONS", False)
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", False)

    return Settings(
        access_code=access_code,
        kv_backend=kv_backend,
        data_dir=data_dir,
        kv_rest_api_url=kv_rest_api_url,
        kv_rest_api_token=kv_rest_api_token,
        serialize_mutations=serialize_mutations,
        log_level=log_level,
        debug_log_requests=debug_log_requests,
    )
