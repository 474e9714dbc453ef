"""
Test cases for the live status endpoint
"""
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from solar_monitor.core.config import settings

from tests.conftest import SAMPLE_SNAPSHOT

URL = f"{settings.API_V1_STR}/live-status"


def test_live_status(client: TestClient, telemetry_client: MagicMock):
    response = client.get(URL)

    assert response.status_code == 200
    body = response.json()
    assert body["data"]["total_runtime"] == 120
    assert body["view"]["battery_pct"] == 80
    assert [chart["key"] for chart in body["charts"]] == ["temp", "battery", "current"]
    assert all(chart["revision"] == 0 for chart in body["charts"])
    telemetry_client.get_live_data.assert_awaited_once()


def test_second_load_uses_cache_and_updates_charts_in_place(
    client: TestClient, telemetry_client: MagicMock
):
    client.get(URL)
    response = client.get(URL)

    assert response.status_code == 200
    telemetry_client.get_live_data.assert_awaited_once()
    charts = {chart["key"]: chart for chart in response.json()["charts"]}
    assert charts["battery"]["revision"] == 1
    assert charts["battery"]["config"]["options"]["plugins"]["centerText"] == {"text": "80%"}
    assert charts["battery"]["config"]["data"]["datasets"][0]["data"] == [80, 20]


def test_live_status_without_data(client: TestClient, telemetry_client: MagicMock):
    telemetry_client.get_live_data.return_value = None

    response = client.get(URL)

    assert response.status_code == 200
    assert response.json() == {"data": None, "view": None, "charts": []}


def test_failed_fetch_is_retried_on_next_load(client: TestClient, telemetry_client: MagicMock):
    telemetry_client.get_live_data.return_value = None
    client.get(URL)
    telemetry_client.get_live_data.return_value = {"total_runtime": 7}

    response = client.get(URL)

    assert response.json()["data"] == {"total_runtime": 7}
    assert telemetry_client.get_live_data.await_count == 2


def test_live_status_renders_oddly_typed_fields(client: TestClient, telemetry_client: MagicMock):
    telemetry_client.get_live_data.return_value = dict(
        SAMPLE_SNAPSHOT, timestamp=1754303400000, error_code="E12", total_runtime="n/a"
    )

    body = client.get(URL).json()

    assert body["data"]["error_code"] == "E12"
    rows = {row["element_id"]: row["value"] for row in body["view"]["parameters"]}
    assert rows["Time Stamp"] == "2025-08-04 10:30:00"
    assert rows["Total Runtime"] == "n/a min"
    assert rows["Battery %"] == "80 %"


def test_request_id_and_timing_headers(client: TestClient):
    response = client.get(URL, headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"
    assert float(response.headers["X-Process-Time"]) >= 0

    generated = client.get(URL).headers["X-Request-ID"]
    assert generated and generated != "abc-123"
