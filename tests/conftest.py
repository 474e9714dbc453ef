"""
Shared fixtures: a throwaway SQLite cache database, fake upstream clients and
a TestClient wired to both through dependency overrides.
"""
import os

os.environ.setdefault("ASYNC_DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("DISPLAY_TIMEZONE", "UTC")

import asyncio
import copy
from typing import AsyncGenerator, Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from solar_monitor.api import deps
from solar_monitor.db.async_session import Base, get_async_db
from solar_monitor.main import app
from solar_monitor.models import CachedResponse  # noqa: F401
from solar_monitor.schemas.ml import MLBundle
from solar_monitor.utils.charts import ChartRegistries
from solar_monitor.utils.ml_client import MLClient
from solar_monitor.utils.telemetry_client import TelemetryClient

TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

# NullPool: TestClient runs the app on its own event loop
engine = create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)

TestingSessionLocal = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

SAMPLE_SNAPSHOT = {
    "total_runtime": 120,
    "battery_percentage": 204,
    "running_current": 42,
    "avg_current": 38,
    "motor_speed": 12.3456,
    "connectivity_status": 1,
    "device_id": 7,
    "device_state": 2,
    "fw_version": 3,
    "temperature": "31.5",
    "humidity": "48",
    "voltage_battery": 3700,
    "voltage_solar_panel": 5200,
    "panel_location": 4,
    "error_code": 0,
    "dbg_accel_output": 15,
    "dbg_gyro_output": 9,
    "dbg_motor_status_0": 1,
    "dbg_motor_status_1": 0,
    "general_status": 1,
    "timestamp": "2025-08-04T10:30:00Z",
}

SAMPLE_HISTORY = [
    dict(SAMPLE_SNAPSHOT, total_runtime=100, timestamp="2025-08-04T09:30:00Z"),
    dict(SAMPLE_SNAPSHOT, total_runtime=110, timestamp="2025-08-04T10:00:00Z"),
]

SAMPLE_ANOMALY = [
    {"timestamp": "2025-08-04T09:00:00Z", "is_anomaly": 1},
    {"timestamp": "2025-08-04T09:30:00Z", "is_anomaly": -1},
    {"timestamp": "2025-08-04T10:00:00Z", "is_anomaly": 1},
]

SAMPLE_FORECAST = {"timestamp": "2025-08-04T12:00:00Z", "predicted_battery_pct": 72.5}

SAMPLE_HEALTH = {
    "status": "warning",
    "color": "yellow",
    "summary": "Battery draining faster than usual",
    "last_seen": "2025-08-04T10:30:00Z",
    "metrics": {
        "battery_percentage": 64,
        "temperature": 31.5,
        "motor_speed": 12.3,
        "connectivity_status": 1,
        "error_code": 0,
    },
}


async def create_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def db() -> AsyncGenerator[AsyncSession, None]:
    """
    Fresh cache tables for each test; dropped again afterwards.
    """
    await create_tables()
    async with TestingSessionLocal() as session:
        yield session
    await drop_tables()


@pytest.fixture
def telemetry_client() -> MagicMock:
    client = MagicMock(spec=TelemetryClient)
    client.get_live_data = AsyncMock(return_value=copy.deepcopy(SAMPLE_SNAPSHOT))
    client.get_history_data = AsyncMock(return_value=copy.deepcopy(SAMPLE_HISTORY))
    return client


@pytest.fixture
def ml_bundle() -> MLBundle:
    return MLBundle.model_validate({
        "anomaly": SAMPLE_ANOMALY,
        "forecast": SAMPLE_FORECAST,
        "health": SAMPLE_HEALTH,
        "last_updated": "2025-08-04T10:31:00+00:00",
    })


@pytest.fixture
def ml_client(ml_bundle: MLBundle) -> MagicMock:
    client = MagicMock(spec=MLClient)
    client.fetch_all = AsyncMock(return_value=ml_bundle)
    return client


@pytest.fixture
def client(telemetry_client: MagicMock, ml_client: MagicMock) -> Generator[TestClient, None, None]:
    """
    TestClient backed by the test database and the fake upstream clients.
    """
    asyncio.run(create_tables())

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_async_db] = override_get_db
    app.dependency_overrides[deps.get_telemetry_client] = lambda: telemetry_client
    app.dependency_overrides[deps.get_ml_client] = lambda: ml_client
    app.state.chart_registries = ChartRegistries()

    with patch("solar_monitor.main.init_db", new=AsyncMock()):
        with TestClient(app) as c:
            yield c

    app.dependency_overrides.clear()
    asyncio.run(drop_tables())


@pytest.fixture
def session_factory() -> async_sessionmaker:
    """For tests that need more than one session on the test database"""
    return TestingSessionLocal
