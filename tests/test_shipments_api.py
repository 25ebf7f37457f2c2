"""
End-to-end tests for the HTTP layer using FastAPI's TestClient.
"""
from __future__ import annotations

import json
import sys
from datetime import datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Garante que o pacote shiptrack seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from shiptrack.app import create_app  # noqa: E402
from shiptrack.core import config as core_config  # noqa: E402


@pytest.fixture()
def data_file(tmp_path, monkeypatch):
    path = tmp_path / "data" / "shipments.json"
    monkeypatch.setenv("DATA_FILE", str(path))
    core_config.get_settings.cache_clear()
    yield path
    core_config.get_settings.cache_clear()


@pytest.fixture()
def client(data_file):
    with TestClient(create_app()) as test_client:
        yield test_client


def _body(**overrides):
    data = {"trackingNo": "ABC123", "sender": {"name": "Loja X"}, "receiver": {"name": "Maria"}}
    data.update(overrides)
    return data


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["status"] == "ok"
    assert payload["timestamp"].endswith("Z")
    datetime.fromisoformat(payload["timestamp"].replace("Z", "+00:00"))


def test_list_empty_store(client, data_file):
    resp = client.get("/api/shipments")
    assert resp.status_code == 200
    assert resp.json() == []
    assert not data_file.exists()


def test_create_list_track_update_delete_flow(client, data_file):
    resp = client.post("/api/shipments", json=_body(status="created"))
    assert resp.status_code == 201
    created = resp.json()
    assert created["id"].startswith("s_")
    assert created["createdAt"] == created["updatedAt"]
    assert created["status"] == "created"
    assert data_file.exists()

    assert client.get("/api/shipments").json() == [created]

    resp = client.get("/api/shipments/track/abc123")
    assert resp.status_code == 200
    assert resp.json()["id"] == created["id"]

    resp = client.put(f"/api/shipments/{created['id']}", json=_body(id="other", createdAt=1, status="delivered"))
    assert resp.status_code == 200
    updated = resp.json()
    assert updated["id"] == created["id"]
    assert updated["createdAt"] == created["createdAt"]
    assert updated["updatedAt"] >= created["updatedAt"]
    assert updated["status"] == "delivered"

    resp = client.delete(f"/api/shipments/{created['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    assert client.get("/api/shipments/track/ABC123").status_code == 404
    resp = client.delete(f"/api/shipments/{created['id']}")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Shipment not found"}


def test_create_missing_fields_returns_400(client):
    resp = client.post("/api/shipments", json={"trackingNo": "X", "sender": "A"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required fields"}
    assert client.get("/api/shipments").json() == []


def test_create_non_object_body_returns_400(client):
    resp = client.post("/api/shipments", json=["not", "an", "object"])
    assert resp.status_code == 400


def test_update_unknown_id_returns_404(client):
    resp = client.put("/api/shipments/missing", json=_body())
    assert resp.status_code == 404
    assert resp.json() == {"error": "Shipment not found"}


def test_corrupt_store_returns_500_per_operation(client, data_file):
    data_file.parent.mkdir(parents=True, exist_ok=True)
    data_file.write_text("{broken", encoding="utf-8")

    cases = [
        (client.get, "/api/shipments", {}, "Failed to read shipments"),
        (client.get, "/api/shipments/track/ABC123", {}, "Failed to find shipment"),
        (client.post, "/api/shipments", {"json": _body()}, "Failed to create shipment"),
        (client.put, "/api/shipments/s_1", {"json": _body()}, "Failed to update shipment"),
        (client.delete, "/api/shipments/s_1", {}, "Failed to delete shipment"),
    ]
    for call, url, kwargs, message in cases:
        resp = call(url, **kwargs)
        assert resp.status_code == 500
        assert resp.json() == {"error": message}
    assert data_file.read_text(encoding="utf-8") == "{broken"


def test_cors_headers_allow_any_origin(client):
    resp = client.get("/api/health", headers={"Origin": "http://example.com"})
    assert resp.headers.get("access-control-allow-origin") == "*"


def test_malformed_json_body_returns_400(client):
    for call, url in ((client.post, "/api/shipments"), (client.put, "/api/shipments/s_1")):
        resp = call(url, content=b"{bad", headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Missing required fields"}


def test_non_finite_numbers_are_rejected_and_file_stays_valid(client, data_file):
    created = client.post("/api/shipments", json=_body()).json()
    before = data_file.read_text(encoding="utf-8")
    headers = {"Content-Type": "application/json"}

    resp = client.post(
        "/api/shipments",
        content=b'{"trackingNo": "A", "sender": "s", "receiver": "r", "w": NaN}',
        headers=headers,
    )
    assert resp.status_code == 400
    resp = client.put(
        f"/api/shipments/{created['id']}",
        content=b'{"trackingNo": "A", "sender": "s", "receiver": "r", "w": Infinity}',
        headers=headers,
    )
    assert resp.status_code == 400

    assert data_file.read_text(encoding="utf-8") == before
    json.loads(before, parse_constant=lambda name: pytest.fail(f"non-standard JSON: {name}"))
    resp = client.get("/api/shipments")
    assert resp.status_code == 200
    assert resp.json() == [created]
