from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from solar_monitor.api import deps
from solar_monitor.schemas import ReportsResponse
from solar_monitor.utils.charts import REPORTS_SCREEN, ChartRegistries
from solar_monitor.utils.dashboard import load_reports
from solar_monitor.utils.telemetry_client import TelemetryClient

router = APIRouter()


@router.get("", response_model=ReportsResponse)
async def get_reports(
    db: AsyncSession = Depends(deps.get_async_db),
    telemetry: TelemetryClient = Depends(deps.get_telemetry_client),
    registries: ChartRegistries = Depends(deps.get_chart_registries),
) -> Any:
    """
    Runtime, debug output and error code charts, performance metrics and
    recent history
    """
    return await load_reports(db, telemetry, registries.for_screen(REPORTS_SCREEN))
