import pytest
from fastapi.testclient import TestClient

from weatherscore.observability.middleware import split_source


def test_request_id_header(client: TestClient):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.headers.get("x-request-id")


def test_request_id_is_echoed(client: TestClient):
    resp = client.get("/api/health", headers={"x-request-id": "abc-123"})
    assert resp.headers["x-request-id"] == "abc-123"


def test_metrics_endpoint_exposed(client: TestClient):
    client.get("/api/health")
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "http_requests_total" in resp.text
    assert "weather_provider_runs_total" in resp.text


def test_latency_health_stats(client: TestClient):
    for _ in range(3):
        client.get("/api/health")
    resp = client.get("/api/health/latency")
    assert resp.status_code == 200
    entries = {p["path"]: p for p in resp.json()["paths"]}
    row = entries["/api/health"]
    assert row["p95_ms"] >= row["p50_ms"]
    assert row["sample_size"] >= 1


def test_accuracy_paths_share_one_metrics_label(client: TestClient):
    client.get("/api/weather/accuracy/NWS")
    client.get("/api/weather/accuracy/OWM")
    paths = {p["path"] for p in client.get("/api/health/latency").json()["paths"]}
    assert "/api/weather/accuracy/{source}" in paths
    assert "/api/weather/accuracy/NWS" not in paths
    assert "/api/weather/accuracy/OWM" not in paths


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/api/weather/accuracy/ECMWF", ("/api/weather/accuracy/{source}", "ECMWF")),
        ("/api/weather/accuracy", ("/api/weather/accuracy", None)),
        ("/api/weather/accuracy/", ("/api/weather/accuracy/", None)),
        ("/api/weather/forecasts", ("/api/weather/forecasts", None)),
    ],
)
def test_split_source(path, expected):
    assert split_source(path) == expected
