"""
Test service endpoints.
"""
from toolkit import __version__


def test_health_check(test_client):
    """Health probe reports service and version."""
    response = test_client.get("/healthz")

    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["version"] == __version__
    assert data["service"] == "toolkit-colors"


def test_metrics_summary(test_client):
    response = test_client.get("/metrics")

    assert response.status_code == 200
    data = response.json()
    for key in ("uptime_seconds", "counters", "timing_stats", "palette_size_stats"):
        assert key in data
