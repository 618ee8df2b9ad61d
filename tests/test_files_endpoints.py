from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from persistence.collection import FILES_KEY
from persistence.rest_store import RestKeyValueStore

CODE = "open-sesame"


def _put(client, filename, content, code=CODE):
    return client.post("/api/files", json={"filename": filename, "content": content, "accessCode": code})


def _delete(client, filename, code=CODE):
    return client.request("DELETE", "/api/files", params={"filename": filename}, json={"accessCode": code})


def test_create_overwrite_delete_scenario(client):
    assert client.get("/api/files").json() == {"files": {}}

    r = _put(client, "a.txt", "hi")
    assert r.status_code == 200
    assert r.json() == {"success": True, "filename": "a.txt"}
    assert client.get("/api/files").json() == {"files": {"a.txt": "hi"}}

    assert _put(client, "a.txt", "bye").status_code == 200
    assert client.get("/api/files").json() == {"files": {"a.txt": "bye"}}

    r = _delete(client, "a.txt")
    assert r.status_code == 200
    assert r.json() == {"success": True, "filename": "a.txt"}
    assert client.get("/api/files").json() == {"files": {}}


def test_put_with_wrong_code_is_unauthorized_and_changes_nothing(client, memory_store):
    memory_store.set(FILES_KEY, {"keep.txt": "x"})
    before = memory_store.raw(FILES_KEY)

    r = _put(client, "a.txt", "hi", code="wrong")
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid access code"}

    r = client.post("/api/files", json={"filename": "a.txt", "content": "hi"})
    assert r.status_code == 401
    assert memory_store.raw(FILES_KEY) == before


def test_delete_with_wrong_or_missing_code_is_unauthorized(client, memory_store):
    memory_store.set(FILES_KEY, {"keep.txt": "x"})
    before = memory_store.raw(FILES_KEY)

    assert _delete(client, "keep.txt", code="wrong").status_code == 401
    assert client.delete("/api/files", params={"filename": "keep.txt"}).status_code == 401
    assert memory_store.raw(FILES_KEY) == before


@pytest.mark.parametrize(
    "body, message",
    [
        ({"content": "hi"}, "Filename is required"),
        ({"filename": "", "content": "hi"}, "Filename is required"),
        ({"filename": 7, "content": "hi"}, "Filename is required"),
        ({"filename": "a.txt"}, "Content is required"),
        ({"filename": "a.txt", "content": None}, "Content is required"),
    ],
)
def test_put_validation(client, body, message):
    r = client.post("/api/files", json={**body, "accessCode": CODE})
    assert r.status_code == 400
    assert r.json() == {"error": message}


def test_put_empty_content_is_valid(client):
    assert _put(client, "empty.txt", "").status_code == 200
    assert client.get("/api/files").json() == {"files": {"empty.txt": ""}}


def test_put_with_malformed_body_is_unauthorized(client):
    r = client.post("/api/files", content=b"{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 401


def test_delete_validation_and_not_found(client, memory_store):
    memory_store.set(FILES_KEY, {"keep.txt": "x"})

    r = client.request("DELETE", "/api/files", json={"accessCode": CODE})
    assert r.status_code == 400
    assert r.json() == {"error": "Filename is required"}

    r = _delete(client, "nope.txt")
    assert r.status_code == 404
    assert r.json() == {"error": "File not found"}
    assert memory_store.get(FILES_KEY) == {"keep.txt": "x"}


def test_filenames_with_special_characters(client):
    name = "reports/Q1 & Q2?.md"
    assert _put(client, name, "# hi").status_code == 200
    assert client.get("/api/files").json()["files"] == {name: "# hi"}
    assert _delete(client, name).status_code == 200


def test_unsupported_methods(client):
    for method in ("PUT", "PATCH"):
        r = client.request(method, "/api/files", json={"accessCode": CODE})
        assert r.status_code == 405
        assert r.json() == {"error": "Method not allowed"}


def test_store_error_is_500(make_app):
    class _BrokenStore:
        def get(self, key):
            raise ConnectionError("kv down")

        def set(self, key, value):
            raise ConnectionError("kv down")

    client = TestClient(make_app(store=_BrokenStore()))
    r = client.get("/api/files")
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}

    r = _put(client, "a.txt", "hi")
    assert r.status_code == 500


def test_cors_headers_on_simple_request(client):
    r = client.get("/api/files", headers={"Origin": "https://editor.example.com"})
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "*"


def test_cors_preflight(client):
    r = client.options(
        "/api/files",
        headers={
            "Origin": "https://editor.example.com",
            "Access-Control-Request-Method": "DELETE",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "*"
    allowed = {m.strip() for m in r.headers["access-control-allow-methods"].split(",")}
    assert {"GET", "OPTIONS", "POST", "DELETE"} <= allowed


def test_other_paths_use_error_body(client):
    r = client.get("/api/nothing-here")
    assert r.status_code == 404
    assert "error" in r.json()


@pytest.mark.parametrize(
    "upstream",
    [
        httpx.Response(503, json={"error": "upstream maintenance"}),
        httpx.Response(200, json={"error": "WRONGTYPE secret detail"}),
    ],
)
def test_rest_store_failure_is_reported_generically(make_app, caplog, upstream):
    http = httpx.Client(transport=httpx.MockTransport(lambda request: upstream))
    store = RestKeyValueStore("https://kv.example.com", "tok", client=http)
    client = TestClient(make_app(store=store))

    with caplog.at_level("ERROR", logger="document_service"):
        r = client.get("/api/files")
        assert r.status_code == 500
        assert r.json() == {"error": "Internal server error"}

        r = _put(client, "a.txt", "hi")
        assert r.status_code == 500
        assert r.json() == {"error": "Internal server error"}

    assert any("KV API error" in rec.getMessage() for rec in caplog.records)
