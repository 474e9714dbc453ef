from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from solar_monitor.api import deps
from solar_monitor.schemas import AlertsResponse
from solar_monitor.utils.dashboard import load_alerts
from solar_monitor.utils.ml_client import MLClient
from solar_monitor.utils.telemetry_client import TelemetryClient

router = APIRouter()


@router.get("", response_model=AlertsResponse)
async def get_alerts(
    db: AsyncSession = Depends(deps.get_async_db),
    telemetry: TelemetryClient = Depends(deps.get_telemetry_client),
    ml: MLClient = Depends(deps.get_ml_client),
) -> Any:
    """
    Alerts derived from the live snapshot, anomaly flags and health status
    """
    return await load_alerts(db, telemetry, ml)
