from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from solar_monitor.api import deps
from solar_monitor.schemas import LiveStatusResponse
from solar_monitor.utils.charts import LIVE_STATUS_SCREEN, ChartRegistries
from solar_monitor.utils.dashboard import load_live_status
from solar_monitor.utils.logger import get_logger
from solar_monitor.utils.telemetry_client import TelemetryClient

logger = get_logger("api.live_status")

router = APIRouter()


@router.get("", response_model=LiveStatusResponse)
async def get_live_status(
    db: AsyncSession = Depends(deps.get_async_db),
    telemetry: TelemetryClient = Depends(deps.get_telemetry_client),
    registries: ChartRegistries = Depends(deps.get_chart_registries),
) -> Any:
    """
    Current device snapshot with KPI cards, parameter table and live charts.
    `data` is null while no snapshot is available.
    """
    response = await load_live_status(db, telemetry, registries.for_screen(LIVE_STATUS_SCREEN))
    if response.data is None:
        logger.info("Live status requested but no telemetry snapshot is available")
    return response
