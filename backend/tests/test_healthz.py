from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from command_center.main import app


@pytest.mark.usefixtures("database")
def test_database_health_endpoint_success() -> None:
    client = TestClient(app)
    response = client.get("/healthz/database")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["dialect"] == "sqlite"
    assert "pool" in payload


def test_database_health_endpoint_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    client = TestClient(app)

    def raise_runtime_error():
        raise RuntimeError("missing database url")

    monkeypatch.setattr("command_center.main.get_engine", raise_runtime_error)
    response = client.get("/healthz/database")
    assert response.status_code == 503
    assert response.json()["detail"] == "missing database url"


def test_liveness_reports_advisor_mode() -> None:
    response = TestClient(app).get("/healthz")
    assert response.json() == {"status": "ok", "advisor_mode": "off"}
