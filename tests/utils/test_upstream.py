"""
Test cases for the telemetry/ML clients and their failure fallbacks
"""
import asyncio
from typing import Any, Dict

import aiohttp
import pytest

from solar_monitor.utils.ml_client import ANOMALY_PATH, FORECAST_PATH, HEALTH_PATH, MLClient
from solar_monitor.utils.telemetry_client import (
    HISTORY_DATA_PATH,
    LIVE_DATA_PATH,
    TelemetryClient,
)
from solar_monitor.utils.upstream import build_url, fetch_json

from tests.conftest import SAMPLE_ANOMALY, SAMPLE_FORECAST, SAMPLE_HEALTH, SAMPLE_SNAPSHOT

BASE = "http://backend.test"


class FakeResponse:
    def __init__(self, status: int = 200, body: Any = None):
        self.status = status
        self.ok = status < 400
        self._body = body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def json(self, content_type=None):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeSession:
    """Maps path -> FakeResponse or exception; records the URLs requested"""

    def __init__(self, routes: Dict[str, Any]):
        self.routes = routes
        self.requested = []

    def get(self, url: str):
        self.requested.append(url)
        path = url[len(BASE):]
        result = self.routes.get(path, FakeResponse(404))
        if isinstance(result, Exception):
            raise result
        return result


def test_build_url():
    assert build_url("http://a/", "/api/x") == "http://a/api/x"
    assert build_url("http://a", "api/x") == "http://a/api/x"


@pytest.mark.asyncio
async def test_fetch_json_ok():
    session = FakeSession({"/x": FakeResponse(200, {"a": 1})})
    assert await fetch_json(session, f"{BASE}/x") == {"a": 1}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "result",
    [
        FakeResponse(500, {"error": "boom"}),
        FakeResponse(200, ValueError("not json")),
        aiohttp.ClientConnectionError("refused"),
        asyncio.TimeoutError(),
    ],
)
async def test_fetch_json_failures_return_none(result):
    session = FakeSession({"/x": result})
    assert await fetch_json(session, f"{BASE}/x") is None


@pytest.mark.asyncio
async def test_telemetry_client_paths_and_payloads():
    session = FakeSession({
        LIVE_DATA_PATH: FakeResponse(200, SAMPLE_SNAPSHOT),
        HISTORY_DATA_PATH: FakeResponse(200, [SAMPLE_SNAPSHOT, "junk"]),
    })
    client = TelemetryClient(session, BASE)

    assert await client.get_live_data() == SAMPLE_SNAPSHOT
    assert await client.get_history_data() == [SAMPLE_SNAPSHOT]
    assert session.requested == [
        "http://backend.test/api/fakedataRoutes/fake-data",
        "http://backend.test/api/historyRoutes/machines/history",
    ]


@pytest.mark.asyncio
async def test_telemetry_client_fallbacks():
    session = FakeSession({
        LIVE_DATA_PATH: FakeResponse(200, [1, 2, 3]),
        HISTORY_DATA_PATH: FakeResponse(200, {"rows": []}),
    })
    client = TelemetryClient(session, BASE)

    assert await client.get_live_data() is None
    assert await client.get_history_data() == []

    client = TelemetryClient(FakeSession({}), BASE)
    assert await client.get_live_data() is None
    assert await client.get_history_data() == []


@pytest.mark.asyncio
async def test_ml_fetch_all():
    session = FakeSession({
        ANOMALY_PATH: FakeResponse(200, SAMPLE_ANOMALY),
        FORECAST_PATH: FakeResponse(200, SAMPLE_FORECAST),
        HEALTH_PATH: FakeResponse(200, SAMPLE_HEALTH),
    })
    bundle = await MLClient(session, BASE).fetch_all()

    assert len(bundle.anomaly) == 3
    assert bundle.anomaly[1].is_anomaly == -1
    assert bundle.forecast.predicted_battery_pct == 72.5
    assert bundle.health.status == "warning"
    assert bundle.last_updated is not None


@pytest.mark.asyncio
async def test_ml_fetch_all_falls_back_per_result():
    session = FakeSession({
        ANOMALY_PATH: FakeResponse(200, [{"timestamp": "2025-08-04T09:00:00Z"}] + SAMPLE_ANOMALY[:1]),
        FORECAST_PATH: FakeResponse(503),
        HEALTH_PATH: aiohttp.ClientConnectionError("refused"),
    })
    bundle = await MLClient(session, BASE).fetch_all()

    # the row without is_anomaly is dropped, the valid one kept
    assert len(bundle.anomaly) == 1
    assert bundle.forecast is None
    assert bundle.health is None


@pytest.mark.asyncio
async def test_ml_fetch_all_everything_down():
    bundle = await MLClient(FakeSession({}), BASE).fetch_all()

    assert bundle.anomaly == []
    assert bundle.forecast is None
    assert bundle.health is None
