"""
Screen loaders: fetch (through the cache where the screen caches), validate,
build the view and the chart specs. Used by the JSON API, the HTML pages and
the live event stream alike.
"""
import time
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from solar_monitor.core.config import settings
from solar_monitor.schemas.dashboard import (
    AIIntelligenceResponse,
    AlertsResponse,
    LiveStatusResponse,
    ReportsResponse,
)
from solar_monitor.utils.cache import (
    HISTORY_DATA_KEY,
    LIVE_DATA_KEY,
    REPORT_DATA_KEY,
    Clock,
    get_or_fetch,
)
from solar_monitor.utils.charts import ChartRegistry
from solar_monitor.utils.ml_client import MLClient
from solar_monitor.utils.telemetry_client import TelemetryClient
from solar_monitor.utils.views import (
    build_ai_view,
    build_alerts,
    build_live_view,
    build_reports_view,
    parse_snapshot,
    render_report_charts,
    update_live_charts,
)


async def _history_or_none(telemetry: TelemetryClient):
    return await telemetry.get_history_data() or None


async def load_live_status(
    db: AsyncSession,
    telemetry: TelemetryClient,
    registry: ChartRegistry,
    clock: Clock = time.time,
) -> LiveStatusResponse:
    data = await get_or_fetch(
        db, LIVE_DATA_KEY, telemetry.get_live_data, settings.CACHE_TTL_SECONDS, clock
    )
    snapshot = parse_snapshot(data)
    if snapshot is None:
        return LiveStatusResponse()

    update_live_charts(registry, snapshot)
    return LiveStatusResponse(
        data=data,
        view=build_live_view(snapshot, settings.DISPLAY_TIMEZONE),
        charts=registry.payloads(),
    )


async def load_reports(
    db: AsyncSession,
    telemetry: TelemetryClient,
    registry: ChartRegistry,
    clock: Clock = time.time,
) -> ReportsResponse:
    data = await get_or_fetch(
        db, REPORT_DATA_KEY, telemetry.get_live_data, settings.CACHE_TTL_SECONDS, clock
    )
    snapshot = parse_snapshot(data)
    if snapshot is None:
        return ReportsResponse()

    history = await get_or_fetch(
        db, HISTORY_DATA_KEY, lambda: _history_or_none(telemetry),
        settings.CACHE_TTL_SECONDS, clock,
    )
    render_report_charts(registry, snapshot)
    return ReportsResponse(
        data=data,
        view=build_reports_view(
            snapshot, history or [], settings.DISPLAY_TIMEZONE, settings.HISTORY_TABLE_LIMIT
        ),
        charts=registry.payloads(),
    )


async def load_ai_intelligence(ml: MLClient) -> AIIntelligenceResponse:
    bundle = await ml.fetch_all()
    return AIIntelligenceResponse(
        anomaly=bundle.anomaly,
        forecast=bundle.forecast,
        health=bundle.health,
        last_updated=bundle.last_updated,
        view=build_ai_view(bundle, settings.DISPLAY_TIMEZONE, settings.ANOMALY_LIST_LIMIT),
    )


async def load_alerts(
    db: AsyncSession,
    telemetry: TelemetryClient,
    ml: Optional[MLClient],
    clock: Clock = time.time,
) -> AlertsResponse:
    data = await get_or_fetch(
        db, LIVE_DATA_KEY, telemetry.get_live_data, settings.CACHE_TTL_SECONDS, clock
    )
    bundle = await ml.fetch_all() if ml is not None else None
    return AlertsResponse(
        alerts=build_alerts(
            parse_snapshot(data), bundle, settings.DISPLAY_TIMEZONE, settings.ANOMALY_LIST_LIMIT
        )
    )
