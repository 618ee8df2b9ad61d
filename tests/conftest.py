from __future__ import annotations

import dataclasses
from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


ACCESS_CODE = "open-sesame"


@pytest.fixture
def settings(tmp_path: Path):
    """
    Settings for tests: memory backend, data dir in a temp directory, known access code.
    """
    from settings import Settings

    return Settings(
        access_code=ACCESS_CODE,
        kv_backend="memory",
        data_dir=tmp_path / "data",
        kv_rest_api_url="",
        kv_rest_api_token="",
        serialize_mutations=False,
        log_level="INFO",
        debug_log_requests=False,
    )


@pytest.fixture
def memory_store():
    from persistence.memory_store import InMemoryKeyValueStore

    return InMemoryKeyValueStore()


@pytest.fixture
def make_app(settings, memory_store):
    """
    Build an app around the shared memory store; keyword overrides replace settings fields.
    """
    import app as app_module

    def _make(store=None, **overrides):
        cfg = dataclasses.replace(settings, **overrides) if overrides else settings
        return app_module.create_app(cfg, store if store is not None else memory_store)

    return _make


@pytest.fixture
def client(make_app):
    from fastapi.testclient import TestClient

    return TestClient(make_app())
