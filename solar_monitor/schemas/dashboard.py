from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel

from solar_monitor.schemas.charts import ChartPayload
from solar_monitor.schemas.ml import AnomalyRow, Forecast, HealthSummary


class KpiCard(BaseModel):
    label: str
    value: str
    trend: str
    trend_class: str  # up | down | ok


class ParameterRow(BaseModel):
    element_id: str
    label: str
    value: str


class LiveStatusView(BaseModel):
    battery_pct: int
    kpis: List[KpiCard]
    parameters: List[ParameterRow]


class ReportsView(BaseModel):
    metrics: List[ParameterRow]
    history: List[Dict[str, Any]] = []


class AnomalyItem(BaseModel):
    timestamp: str
    is_anomaly: bool
    marker: str


class HealthPalette(BaseModel):
    background: str
    border: str
    text: str


class HealthCard(BaseModel):
    status: str
    color: str
    summary: str
    last_seen: Optional[str] = None
    palette: HealthPalette
    metrics: List[ParameterRow]


class AIView(BaseModel):
    latest_anomaly: Optional[str] = None
    last_updated: Optional[str] = None  # in the display timezone
    recent_anomalies: List[AnomalyItem] = []
    forecast_at: Optional[str] = None
    forecast_value: Optional[str] = None
    health: Optional[HealthCard] = None
    palette: HealthPalette


class Alert(BaseModel):
    severity: str  # info | warning | critical
    source: str  # telemetry | anomaly | health
    message: str
    timestamp: Optional[str] = None


class TabInfo(BaseModel):
    id: str
    label: str


class ParameterLocation(BaseModel):
    key: str
    tab: str
    element_id: str


class CacheEntryStatus(BaseModel):
    key: str
    fetched_at: datetime
    age_seconds: float
    fresh: bool


# API responses

class LiveStatusResponse(BaseModel):
    data: Optional[Dict[str, Any]] = None
    view: Optional[LiveStatusView] = None
    charts: List[ChartPayload] = []


class ReportsResponse(BaseModel):
    data: Optional[Dict[str, Any]] = None
    view: Optional[ReportsView] = None
    charts: List[ChartPayload] = []


class AIIntelligenceResponse(BaseModel):
    anomaly: List[AnomalyRow] = []
    forecast: Optional[Forecast] = None
    health: Optional[HealthSummary] = None
    last_updated: Optional[datetime] = None
    view: AIView


class AlertsResponse(BaseModel):
    alerts: List[Alert]


class CacheStatusResponse(BaseModel):
    ttl_seconds: int
    entries: List[CacheEntryStatus]
