"""
Test cases for the AI intelligence and alerts endpoints
"""
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from solar_monitor.core.config import settings
from solar_monitor.schemas.ml import MLBundle

from tests.conftest import SAMPLE_SNAPSHOT


def test_ai_intelligence(client: TestClient):
    response = client.get(f"{settings.API_V1_STR}/ai-intelligence")

    assert response.status_code == 200
    body = response.json()
    assert len(body["anomaly"]) == 3
    assert body["forecast"]["predicted_battery_pct"] == 72.5
    assert body["health"]["color"] == "yellow"
    assert body["view"]["latest_anomaly"] == "✅ Normal"
    assert body["view"]["forecast_value"] == "72.5%"
    assert body["view"]["palette"]["background"] == "#fff7ed"


def test_ai_intelligence_is_fetched_every_time(client: TestClient, ml_client: MagicMock):
    client.get(f"{settings.API_V1_STR}/ai-intelligence")
    client.get(f"{settings.API_V1_STR}/ai-intelligence")

    assert ml_client.fetch_all.await_count == 2


def test_ai_intelligence_fallbacks(client: TestClient, ml_client: MagicMock):
    ml_client.fetch_all.return_value = MLBundle()

    response = client.get(f"{settings.API_V1_STR}/ai-intelligence")

    assert response.status_code == 200
    body = response.json()
    assert body["anomaly"] == []
    assert body["forecast"] is None
    assert body["health"] is None
    assert body["view"]["latest_anomaly"] is None


def test_alerts(client: TestClient, telemetry_client: MagicMock):
    telemetry_client.get_live_data.return_value = dict(SAMPLE_SNAPSHOT, error_code=4)

    response = client.get(f"{settings.API_V1_STR}/alerts")

    assert response.status_code == 200
    alerts = response.json()["alerts"]
    assert alerts[0] == {
        "severity": "critical",
        "source": "telemetry",
        "message": "Device reported error code 4",
        "timestamp": "2025-08-04 10:30:00",
    }
    assert {alert["source"] for alert in alerts} == {"telemetry", "health", "anomaly"}
