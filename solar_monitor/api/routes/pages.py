from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from solar_monitor.api import deps
from solar_monitor.core.config import settings
from solar_monitor.utils.cache import cache_status, invalidate_all
from solar_monitor.utils.charts import LIVE_STATUS_SCREEN, REPORTS_SCREEN, ChartRegistries
from solar_monitor.utils.dashboard import (
    load_ai_intelligence,
    load_alerts,
    load_live_status,
    load_reports,
)
from solar_monitor.utils.logger import get_logger
from solar_monitor.utils.ml_client import MLClient
from solar_monitor.utils.navigation import TABS, TAB_IDS, find_parameter, get_tab
from solar_monitor.utils.telemetry_client import TelemetryClient

logger = get_logger("api.pages")

TEMPLATES_DIR = Path(__file__).resolve().parents[2] / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter()


async def render_tab(
    request: Request,
    tab_id: str,
    db: AsyncSession,
    telemetry: TelemetryClient,
    ml: MLClient,
    registries: ChartRegistries,
    highlight: Optional[str] = None,
    message: Optional[str] = None,
    status_code: int = 200,
) -> Any:
    tab = get_tab(tab_id)
    if tab is None:
        raise HTTPException(status_code=404, detail="Page not found")

    context: Dict[str, Any] = {
        "project_name": settings.PROJECT_NAME,
        "api_prefix": settings.API_V1_STR,
        "tabs": TABS,
        "active_tab": tab,
        "highlight": highlight,
        "message": message,
    }

    if tab.id == "live-status":
        live = await load_live_status(db, telemetry, registries.for_screen(LIVE_STATUS_SCREEN))
        context["live"] = live
        context["charts"] = [chart.model_dump() for chart in live.charts]
    elif tab.id == "reports":
        reports = await load_reports(db, telemetry, registries.for_screen(REPORTS_SCREEN))
        context["reports"] = reports
        context["charts"] = [chart.model_dump() for chart in reports.charts]
    elif tab.id == "ai-intelligence":
        context["ai"] = await load_ai_intelligence(ml)
    elif tab.id == "alerts":
        context["alerts"] = (await load_alerts(db, telemetry, ml)).alerts
    elif tab.id == "admin":
        context["cache_entries"] = await cache_status(db, settings.CACHE_TTL_SECONDS)
        context["config"] = {
            "Telemetry backend": settings.TELEMETRY_API_BASE,
            "ML backend": settings.ML_API_BASE,
            "Cache TTL (s)": settings.CACHE_TTL_SECONDS,
            "Live poll interval (s)": settings.LIVE_POLL_INTERVAL_SECONDS,
            "Display timezone": settings.DISPLAY_TIMEZONE,
        }

    return templates.TemplateResponse(
        request, f"{tab.id.replace('-', '_')}.html", context, status_code=status_code
    )


@router.get("/")
def read_root() -> Any:
    return RedirectResponse(url="/dashboard")


@router.get("/dashboard")
async def dashboard_home(
    request: Request,
    db: AsyncSession = Depends(deps.get_async_db),
    telemetry: TelemetryClient = Depends(deps.get_telemetry_client),
    ml: MLClient = Depends(deps.get_ml_client),
    registries: ChartRegistries = Depends(deps.get_chart_registries),
) -> Any:
    return await render_tab(request, settings.DEFAULT_TAB, db, telemetry, ml, registries)


@router.get("/dashboard/{tab_id}")
async def dashboard_tab(
    request: Request,
    tab_id: str,
    highlight: Optional[str] = None,
    db: AsyncSession = Depends(deps.get_async_db),
    telemetry: TelemetryClient = Depends(deps.get_telemetry_client),
    ml: MLClient = Depends(deps.get_ml_client),
    registries: ChartRegistries = Depends(deps.get_chart_registries),
) -> Any:
    return await render_tab(
        request, tab_id, db, telemetry, ml, registries, highlight=highlight
    )


@router.post("/dashboard/admin/clear-cache")
async def clear_cache_from_admin(db: AsyncSession = Depends(deps.get_async_db)) -> Any:
    await invalidate_all(db)
    return RedirectResponse(url="/dashboard/admin", status_code=303)


@router.get("/search")
async def search(
    request: Request,
    q: str = "",
    from_tab: Optional[str] = None,
    db: AsyncSession = Depends(deps.get_async_db),
    telemetry: TelemetryClient = Depends(deps.get_telemetry_client),
    ml: MLClient = Depends(deps.get_ml_client),
    registries: ChartRegistries = Depends(deps.get_chart_registries),
) -> Any:
    """
    Jump to the tab showing the searched parameter and highlight its row
    """
    current_tab = from_tab if from_tab in TAB_IDS else settings.DEFAULT_TAB
    if not q.strip():
        return RedirectResponse(url=f"/dashboard/{current_tab}", status_code=303)

    location = find_parameter(q)
    if location is None:
        logger.info(f"Search for unknown parameter: {q!r}")
        return await render_tab(
            request, current_tab, db, telemetry, ml, registries,
            message="Parameter not found!", status_code=404,
        )

    element = quote(location.element_id)
    return RedirectResponse(
        url=f"/dashboard/{location.tab}?highlight={element}#{element}", status_code=303
    )
