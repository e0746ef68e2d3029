from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from panel.main import app


@pytest.fixture
def client():
    return TestClient(app)


def test_validate_accepts_definition(client):
    body = {
        "name": "Max Players",
        "env_variable": "MAX_PLAYERS",
        "rules": "required|integer",
        "default_value": "",
    }
    r = client.post("/api/eggs/1/variables/validate", json=body)

    assert r.status_code == 200
    data = r.json()
    assert data["ok"] is True
    assert data["variable"]["env_variable"] == "MAX_PLAYERS"
    assert data["variable"]["options"] is None


def test_validate_returns_field_errors(client):
    body = {"name": "Memory", "env_variable": "SERVER_MEMORY", "options": "user_viewable"}
    r = client.post("/api/eggs/7/variables/validate", json=body)

    assert r.status_code == 422
    data = r.json()
    assert data["errors"] == {
        "env_variable": ["The selected env variable is invalid."],
        "options": ["The options field must be an array."],
        "rules": ["The rules field is required."],
        "default_value": ["The default value field must be present."],
    }
    assert data["message"] == "The selected env variable is invalid. (and 3 more errors)"


def test_validate_single_error_message(client):
    body = {"name": "Memory", "env_variable": "SERVER_MEMORY", "rules": "required", "default_value": None}
    r = client.post("/api/eggs/7/variables/validate", json=body)

    assert r.status_code == 422
    assert r.json()["message"] == "The selected env variable is invalid."


def test_validate_requires_object_body(client):
    r = client.post("/api/eggs/1/variables/validate", json=["MAX_PLAYERS"])
    assert r.status_code == 422


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["ok"] is True
