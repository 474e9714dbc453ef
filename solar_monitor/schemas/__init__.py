from solar_monitor.schemas.telemetry import TelemetrySnapshot, HistoryRecord
from solar_monitor.schemas.ml import AnomalyRow, Forecast, HealthMetrics, HealthSummary, MLBundle
from solar_monitor.schemas.charts import ChartDataset, ChartSpec, ChartPayload
from solar_monitor.schemas.dashboard import (
    KpiCard,
    ParameterRow,
    LiveStatusView,
    ReportsView,
    AnomalyItem,
    HealthPalette,
    HealthCard,
    AIView,
    Alert,
    TabInfo,
    ParameterLocation,
    CacheEntryStatus,
    LiveStatusResponse,
    ReportsResponse,
    AIIntelligenceResponse,
    AlertsResponse,
    CacheStatusResponse,
)
