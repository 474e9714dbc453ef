import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import aiohttp
from pydantic import ValidationError

from solar_monitor.schemas.ml import AnomalyRow, Forecast, HealthSummary, MLBundle
from solar_monitor.utils.logger import get_logger
from solar_monitor.utils.upstream import build_url, fetch_json

logger = get_logger("upstream")

ANOMALY_PATH = "/api/predict/anomaly"
FORECAST_PATH = "/api/predict/forecast"
HEALTH_PATH = "/api/health"


class MLClient:
    """Read-only client for the ML backend (anomaly, forecast, health)"""

    def __init__(self, session: aiohttp.ClientSession, base_url: str):
        self._session = session
        self.base_url = base_url

    async def get_anomaly(self) -> List[Dict[str, Any]]:
        data = await fetch_json(self._session, build_url(self.base_url, ANOMALY_PATH))
        return data if isinstance(data, list) else []

    async def get_forecast(self) -> Optional[Dict[str, Any]]:
        data = await fetch_json(self._session, build_url(self.base_url, FORECAST_PATH))
        return data if isinstance(data, dict) and data else None

    async def get_health(self) -> Optional[Dict[str, Any]]:
        data = await fetch_json(self._session, build_url(self.base_url, HEALTH_PATH))
        return data if isinstance(data, dict) and data else None

    async def fetch_all(self) -> MLBundle:
        """
        Fetch the three ML results concurrently.

        Each result falls back independently: an empty anomaly list, no
        forecast, no health summary. Rows or objects that don't match the
        expected shape are dropped and logged.
        """
        anomaly_raw, forecast_raw, health_raw = await asyncio.gather(
            self.get_anomaly(), self.get_forecast(), self.get_health()
        )

        anomaly: List[AnomalyRow] = []
        for row in anomaly_raw:
            try:
                anomaly.append(AnomalyRow.model_validate(row))
            except ValidationError as e:
                logger.warning(f"Skipping malformed anomaly row: {str(e)}")

        forecast = None
        if forecast_raw is not None:
            try:
                forecast = Forecast.model_validate(forecast_raw)
            except ValidationError as e:
                logger.warning(f"Discarding malformed forecast: {str(e)}")

        health = None
        if health_raw is not None:
            try:
                health = HealthSummary.model_validate(health_raw)
            except ValidationError as e:
                logger.warning(f"Discarding malformed health summary: {str(e)}")

        return MLBundle(
            anomaly=anomaly,
            forecast=forecast,
            health=health,
            last_updated=datetime.now(timezone.utc),
        )
