from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from solar_monitor.api.routes import (
    live_status_router,
    reports_router,
    ai_intelligence_router,
    alerts_router,
    navigation_router,
    cache_router,
    sse_router,
    pages_router,
)
from solar_monitor.core.config import settings
from solar_monitor.api.middleware import RequestLoggingMiddleware
from solar_monitor.db.async_session import init_db
from solar_monitor.utils.charts import ChartRegistries
from solar_monitor.utils.logger import get_logger
from solar_monitor.utils.upstream import create_session

logger = get_logger("app")

STATIC_DIR = Path(__file__).resolve().parent / "static"

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Live status, reports and ML insights for solar panel cleaning devices",
    version="0.1.0",
)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.add_middleware(RequestLoggingMiddleware)

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# Chart instances live for the lifetime of the process, one registry per screen
app.state.chart_registries = ChartRegistries()

app.include_router(
    live_status_router, prefix=f"{settings.API_V1_STR}/live-status", tags=["live-status"]
)
app.include_router(
    reports_router, prefix=f"{settings.API_V1_STR}/reports", tags=["reports"]
)
app.include_router(
    ai_intelligence_router,
    prefix=f"{settings.API_V1_STR}/ai-intelligence",
    tags=["ai-intelligence"],
)
app.include_router(
    alerts_router, prefix=f"{settings.API_V1_STR}/alerts", tags=["alerts"]
)
app.include_router(
    navigation_router, prefix=f"{settings.API_V1_STR}/navigation", tags=["navigation"]
)
app.include_router(
    cache_router, prefix=f"{settings.API_V1_STR}/cache", tags=["cache"]
)
app.include_router(
    sse_router, prefix=f"{settings.API_V1_STR}/sse", tags=["sse"]
)
app.include_router(pages_router, tags=["pages"])


@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting {settings.PROJECT_NAME}")
    await init_db()
    app.state.http_session = create_session()
    logger.info(
        f"Telemetry backend: {settings.TELEMETRY_API_BASE} | "
        f"ML backend: {settings.ML_API_BASE} | Cache TTL: {settings.CACHE_TTL_SECONDS}s"
    )


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {settings.PROJECT_NAME}")
    session = getattr(app.state, "http_session", None)
    if session is not None:
        await session.close()


@app.get("/health")
def health_check():
    return {"status": "ok"}
