from __future__ import annotations

from fastapi.testclient import TestClient

from qfoods.main import app


def test_healthz_and_metrics_without_lifespan():
    # No context manager: the lifespan (and its Postgres pool) never starts.
    client = TestClient(app)

    assert client.get("/healthz").json() == {"status": "ok"}

    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "qfoods_auth_events" in metrics.text
