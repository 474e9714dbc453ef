# Dependency injection for the API

import aiohttp
from fastapi import Depends, Request
from solar_monitor.core.config import settings
from solar_monitor.db.async_session import get_async_db  # noqa: F401
from solar_monitor.utils.charts import ChartRegistries
from solar_monitor.utils.ml_client import MLClient
from solar_monitor.utils.telemetry_client import TelemetryClient


def get_http_session(request: Request) -> aiohttp.ClientSession:
    return request.app.state.http_session


def get_telemetry_client(
    session: aiohttp.ClientSession = Depends(get_http_session),
) -> TelemetryClient:
    return TelemetryClient(session, settings.TELEMETRY_API_BASE)


def get_ml_client(
    session: aiohttp.ClientSession = Depends(get_http_session),
) -> MLClient:
    return MLClient(session, settings.ML_API_BASE)


def get_chart_registries(request: Request) -> ChartRegistries:
    return request.app.state.chart_registries
