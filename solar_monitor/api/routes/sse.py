import asyncio
import json
from typing import Any, AsyncIterator, Callable, Optional
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession
from solar_monitor.api import deps
from solar_monitor.core.config import settings
from solar_monitor.db.async_session import AsyncSessionLocal
from solar_monitor.utils.charts import LIVE_STATUS_SCREEN, ChartRegistries, ChartRegistry
from solar_monitor.utils.dashboard import load_live_status
from solar_monitor.utils.logger import get_logger
from solar_monitor.utils.telemetry_client import TelemetryClient

logger = get_logger("api.sse")

router = APIRouter()


async def live_event_stream(
    session_factory: Callable[[], AsyncSession],
    telemetry: TelemetryClient,
    registry: ChartRegistry,
    interval: float,
    max_events: Optional[int] = None,
) -> AsyncIterator[str]:
    """
    Re-poll the live snapshot (through the cache) every `interval` seconds.
    Emits the full live payload when a snapshot is available, a heartbeat
    otherwise, so the browser keeps its current charts.
    """
    sent = 0
    try:
        while max_events is None or sent < max_events:
            async with session_factory() as db:
                response = await load_live_status(db, telemetry, registry)

            if response.data is not None:
                yield f"data: {response.model_dump_json()}\n\n"
            else:
                yield f"data: {json.dumps({'heartbeat': True})}\n\n"
            sent += 1

            if max_events is None or sent < max_events:
                await asyncio.sleep(interval)
    except Exception as e:
        logger.error(f"Error in live SSE stream: {str(e)}", exc_info=True)
    finally:
        logger.info(f"Live SSE stream closed after {sent} events")


@router.get("/live")
async def live_stream(
    telemetry: TelemetryClient = Depends(deps.get_telemetry_client),
    registries: ChartRegistries = Depends(deps.get_chart_registries),
) -> Any:
    """
    SSE endpoint pushing refreshed live status and chart specs
    """
    return StreamingResponse(
        live_event_stream(
            AsyncSessionLocal,
            telemetry,
            registries.for_screen(LIVE_STATUS_SCREEN),
            settings.LIVE_POLL_INTERVAL_SECONDS,
        ),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )
