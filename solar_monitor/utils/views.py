"""
Turns fetched telemetry and ML results into what the dashboard shows:
KPI cards, parameter tables, chart specs, the health card and alerts.
"""
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from solar_monitor.schemas.charts import ChartDataset, ChartSpec
from solar_monitor.schemas.dashboard import (
    AIView,
    Alert,
    AnomalyItem,
    HealthCard,
    HealthPalette,
    KpiCard,
    LiveStatusView,
    ParameterRow,
    ReportsView,
)
from solar_monitor.schemas.ml import MLBundle
from solar_monitor.schemas.telemetry import HistoryRecord, TelemetrySnapshot
from solar_monitor.utils.charts import ChartRegistry
from solar_monitor.utils.logger import get_logger

logger = get_logger("app.views")

MISSING = "—"

ANOMALY_FLAG = -1

# Epoch values this large are milliseconds (1e11 s is in the year 5138)
EPOCH_MS_THRESHOLD = 1e11

HEALTH_PALETTES = {
    "red": HealthPalette(background="#fef2f2", border="#fecaca", text="#7f1d1d"),
    "yellow": HealthPalette(background="#fff7ed", border="#fed7aa", text="#7c2d12"),
    "green": HealthPalette(background="#ecfdf5", border="#bbf7d0", text="#065f46"),
}
DEFAULT_PALETTE = HealthPalette(background="#f8fafc", border="#e5e7eb", text="#334155")

HISTORY_COLUMNS = [
    ("Time Stamp", "timestamp"),
    ("Total Runtime", "total_runtime"),
    ("Battery %", "battery_percentage"),
    ("Temperature", "temperature"),
    ("Error Code", "error_code"),
    ("General Status", "general_status"),
]


# Formatting helpers

def to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(result) else result


def to_pct(raw: Any) -> int:
    """Raw 0..255 battery reading to a whole percentage, clamped to 0..100"""
    value = to_float(raw)
    if value is None:
        return 0
    pct = max(0.0, min(100.0, value / 255 * 100))
    return int(math.floor(pct + 0.5))


def format_number(value: Any) -> str:
    if value is None:
        return MISSING
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def with_unit(value: Any, unit: str) -> str:
    text = format_number(value)
    return text if text == MISSING else f"{text} {unit}"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    ISO 8601 strings, datetimes and epoch numbers (seconds or milliseconds)
    to an aware datetime; None when the value can't be read as a time.
    Naive values are taken as UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return _from_epoch(to_float(value))
    else:
        return _from_epoch(to_float(value))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _from_epoch(seconds: Optional[float]) -> Optional[datetime]:
    if seconds is None:
        return None
    if abs(seconds) >= EPOCH_MS_THRESHOLD:
        seconds /= 1000
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def format_timestamp(value: Any, tz_name: str) -> str:
    if value is None or value == "":
        return MISSING
    dt = parse_timestamp(value)
    if dt is None:
        return str(value)
    return dt.astimezone(ZoneInfo(tz_name)).strftime("%Y-%m-%d %H:%M:%S")


def connectivity_label(status: Any) -> str:
    value = to_float(status)
    if value == 1:
        return "Online"
    if value == 0:
        return "Offline"
    return MISSING if status is None else str(status)


def has_error_code(code: Any) -> bool:
    """Non-zero numeric codes and non-empty textual codes other than "0" are errors"""
    value = to_float(code)
    if value is not None:
        return value != 0
    return code is not None and str(code).strip() not in ("", "0")


def parse_snapshot(data: Optional[Dict[str, Any]]) -> Optional[TelemetrySnapshot]:
    if not data:
        return None
    try:
        return TelemetrySnapshot.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Discarding malformed telemetry snapshot: {str(e)}")
        return None


def parse_history(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    records = []
    for row in rows:
        try:
            records.append(HistoryRecord.model_validate(row).model_dump())
        except ValidationError as e:
            logger.warning(f"Skipping malformed history record: {str(e)}")
    return records


# Live status

def build_live_view(snapshot: TelemetrySnapshot, tz_name: str) -> LiveStatusView:
    battery_pct = to_pct(snapshot.battery_percentage)
    motor_speed = to_float(snapshot.motor_speed)

    kpis = [
        KpiCard(label="Total Runtime", value=with_unit(snapshot.total_runtime, "min"),
                trend="+2.4%", trend_class="up"),
        KpiCard(label="Battery %", value=f"{battery_pct}%", trend="Stable", trend_class="ok"),
        KpiCard(label="Current (mA)", value=format_number(snapshot.running_current),
                trend="-15%", trend_class="down"),
        KpiCard(label="Motor Speed",
                value=MISSING if motor_speed is None else f"{motor_speed:.2f}",
                trend="Nominal", trend_class="ok"),
    ]

    rows = [
        ("Device ID", "Device ID", format_number(snapshot.device_id)),
        ("Device State", "Device State", format_number(snapshot.device_state)),
        ("FW Version", "FW Version", format_number(snapshot.fw_version)),
        ("Temperature", "Temperature", with_unit(snapshot.temperature, "°C")),
        ("Humidity", "Humidity", with_unit(snapshot.humidity, "%")),
        ("Voltage Battery", "Voltage Battery", with_unit(snapshot.voltage_battery, "mV")),
        ("Voltage Solar Panel", "Voltage Solar Panel", with_unit(snapshot.voltage_solar_panel, "mV")),
        ("Running Current", "Running Current", with_unit(snapshot.running_current, "mA")),
        ("Avg Current", "Average Current", with_unit(snapshot.avg_current, "mA")),
        ("Motor Speed", "Motor Speed", format_number(snapshot.motor_speed)),
        ("Panel Location", "Panel Location", format_number(snapshot.panel_location)),
        ("Battery %", "Battery", f"{battery_pct} %"),
        ("Connectivity Status", "Connectivity Status", connectivity_label(snapshot.connectivity_status)),
        ("Total Runtime", "Total Runtime", with_unit(snapshot.total_runtime, "min")),
        ("DBG Accel Output", "DBG Accel Output", format_number(snapshot.dbg_accel_output)),
        ("DBG Gyro Output", "DBG Gyro Output", format_number(snapshot.dbg_gyro_output)),
        ("DBG Motor Status 0", "DBG Motor Status 0", format_number(snapshot.dbg_motor_status_0)),
        ("DBG Motor Status 1", "DBG Motor Status 1", format_number(snapshot.dbg_motor_status_1)),
        ("General Status", "General Status", format_number(snapshot.general_status)),
        ("Time Stamp", "Time Stamp", format_timestamp(snapshot.timestamp, tz_name)),
    ]

    return LiveStatusView(
        battery_pct=battery_pct,
        kpis=kpis,
        parameters=[ParameterRow(element_id=e, label=l, value=v) for e, l, v in rows],
    )


def _temperature_chart() -> ChartSpec:
    return ChartSpec(
        key="temp",
        type="bar",
        labels=[""],
        datasets=[ChartDataset(
            label="Temperature (°C)",
            gradient=["#e74c3c", "#3498db"],
            style={"borderRadius": 8, "barThickness": 60},
        )],
        options={
            "indexAxis": "y",
            "responsive": True,
            "maintainAspectRatio": False,
            "animation": {"duration": 800, "easing": "easeOutCubic"},
            "plugins": {"legend": {"display": False}},
            "scales": {
                "x": {"min": 0, "max": 50, "ticks": {"stepSize": 10}},
                "y": {"display": False},
            },
        },
    )


def _battery_chart() -> ChartSpec:
    return ChartSpec(
        key="battery",
        type="doughnut",
        labels=["Battery", "Remaining"],
        datasets=[ChartDataset(
            background_color=["#3498db", "#ecf0f1"],
            border_color="#3498db",
            style={"borderWidth": 0},
        )],
        options={
            "responsive": True,
            "maintainAspectRatio": False,
            "layout": {"padding": 0},
            "cutout": "70%",
            "plugins": {"legend": {"display": False}, "tooltip": {"enabled": True}},
        },
    )


def _current_chart() -> ChartSpec:
    return ChartSpec(
        key="current",
        type="bar",
        labels=["Average Current", "Running Current"],
        datasets=[ChartDataset(
            label="Current (mA)",
            background_color=["#8e44ad", "#27ae60"],
            style={"borderRadius": 10, "borderSkipped": False},
        )],
        options={
            "responsive": True,
            "maintainAspectRatio": False,
            "animation": {"duration": 800, "easing": "easeOutQuart"},
            "plugins": {"legend": {"display": False}},
            "scales": {"y": {"beginAtZero": True, "ticks": {"stepSize": 10}}},
        },
    )


def update_live_charts(registry: ChartRegistry, snapshot: TelemetrySnapshot) -> List[ChartSpec]:
    """Create the live charts on first sight, mutate them in place afterwards"""
    battery_pct = to_pct(snapshot.battery_percentage)
    registry.create_or_update("temp", _temperature_chart, [to_float(snapshot.temperature)])
    registry.create_or_update(
        "battery", _battery_chart, [battery_pct, 100 - battery_pct], center_text=f"{battery_pct}%"
    )
    registry.create_or_update(
        "current", _current_chart,
        [to_float(snapshot.avg_current), to_float(snapshot.running_current)],
    )
    return registry.specs()


# Reports

def build_reports_view(
    snapshot: TelemetrySnapshot,
    history: List[Dict[str, Any]],
    tz_name: str,
    history_limit: int,
) -> ReportsView:
    rows = [
        ("Error Code", format_number(snapshot.error_code)),
        ("Total Runtime", format_number(snapshot.total_runtime)),
        ("DBG Accel Output", format_number(snapshot.dbg_accel_output)),
        ("DBG Gyro Output", format_number(snapshot.dbg_gyro_output)),
        ("DBG Motor Status 0", format_number(snapshot.dbg_motor_status_0)),
        ("DBG Motor Status 1", format_number(snapshot.dbg_motor_status_1)),
        ("General Status", format_number(snapshot.general_status)),
        ("Time Stamp", format_timestamp(snapshot.timestamp, tz_name)),
    ]
    return ReportsView(
        metrics=[ParameterRow(element_id=label, label=label, value=value) for label, value in rows],
        history=build_history_rows(parse_history(history), tz_name, history_limit),
    )


_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _history_sort_key(record: Dict[str, Any]):
    # unparsable timestamps sort after every real one
    dt = parse_timestamp(record.get("timestamp"))
    return (dt is not None, dt or _OLDEST)


def build_history_rows(
    history: List[Dict[str, Any]], tz_name: str, limit: int
) -> List[Dict[str, str]]:
    """Most recent records first, one display string per column"""
    records = sorted(history, key=_history_sort_key, reverse=True)
    rows = []
    for record in records[:limit]:
        row = {}
        for label, field in HISTORY_COLUMNS:
            value = record.get(field)
            if field == "timestamp":
                row[label] = format_timestamp(value, tz_name)
            elif field == "battery_percentage":
                row[label] = MISSING if value is None else f"{to_pct(value)} %"
            else:
                row[label] = format_number(value)
        rows.append(row)
    return rows


def render_report_charts(registry: ChartRegistry, snapshot: TelemetrySnapshot) -> List[ChartSpec]:
    """Reports charts are torn down and rebuilt on every render"""
    registry.destroy_all()

    runtime = to_float(snapshot.total_runtime)
    error_code = to_float(snapshot.error_code)

    registry.create_or_update(
        "runtime",
        lambda: ChartSpec(
            key="runtime",
            type="line",
            labels=["10m", "5m", "Now"],
            datasets=[ChartDataset(
                label="Runtime",
                border_color="#2ecc71",
                background_color="rgba(46,204,113,0.2)",
                style={"tension": 0.3, "fill": True},
            )],
            options={"responsive": True, "maintainAspectRatio": False},
        ),
        [None, None, None] if runtime is None else [runtime - 5, runtime - 2, runtime],
    )
    registry.create_or_update(
        "accel-gyro",
        lambda: ChartSpec(
            key="accel-gyro",
            type="bar",
            labels=["DBG Accel", "DBG Gyro"],
            datasets=[ChartDataset(
                label="Debug",
                background_color=["#3498db", "#9b59b6"],
                style={"borderRadius": 6},
            )],
            options={"responsive": True, "maintainAspectRatio": False},
        ),
        [to_float(snapshot.dbg_accel_output), to_float(snapshot.dbg_gyro_output)],
    )
    registry.create_or_update(
        "error-code",
        lambda: ChartSpec(
            key="error-code",
            type="doughnut",
            labels=["Error", "OK"],
            datasets=[ChartDataset(
                background_color=["#e74c3c", "#2ecc71"],
                style={"cutout": "70%"},
            )],
            options={
                "maintainAspectRatio": False,
                "plugins": {"legend": {"display": False}, "tooltip": {"enabled": True}},
            },
        ),
        [None, None] if error_code is None else [error_code, 1 - error_code],
        center_text=format_number(snapshot.error_code),
    )
    return registry.specs()


# AI intelligence

def health_palette(color: Optional[str]) -> HealthPalette:
    return HEALTH_PALETTES.get(color or "", DEFAULT_PALETTE)


def latest_anomaly_status(bundle: MLBundle) -> Optional[str]:
    if not bundle.anomaly:
        return None
    return "⚠️ Anomaly" if bundle.anomaly[-1].is_anomaly == ANOMALY_FLAG else "✅ Normal"


def build_ai_view(bundle: MLBundle, tz_name: str, anomaly_limit: int) -> AIView:
    recent = list(reversed(bundle.anomaly[-anomaly_limit:])) if anomaly_limit > 0 else []
    items = [
        AnomalyItem(
            timestamp=format_timestamp(row.timestamp, tz_name),
            is_anomaly=row.is_anomaly == ANOMALY_FLAG,
            marker="⚠️" if row.is_anomaly == ANOMALY_FLAG else "✅",
        )
        for row in recent
    ]

    forecast_at = forecast_value = None
    if bundle.forecast is not None:
        forecast_at = format_timestamp(bundle.forecast.timestamp, tz_name)
        forecast_value = f"{format_number(bundle.forecast.predicted_battery_pct)}%"

    health_card = None
    health = bundle.health
    if health is not None:
        metrics = health.metrics
        battery = format_number(metrics.battery_percentage)
        health_card = HealthCard(
            status=health.status.upper(),
            color=health.color,
            summary=health.summary,
            last_seen=format_timestamp(health.last_seen, tz_name) if health.last_seen else None,
            palette=health_palette(health.color),
            metrics=[
                ParameterRow(element_id="health-battery", label="Battery %",
                             value=battery if battery == MISSING else f"{battery}%"),
                ParameterRow(element_id="health-error-code", label="Error Code",
                             value=format_number(metrics.error_code)),
                ParameterRow(element_id="health-connectivity", label="Connectivity",
                             value=connectivity_label(metrics.connectivity_status)),
                ParameterRow(element_id="health-temperature", label="Temp (°C)",
                             value=format_number(metrics.temperature)),
            ],
        )

    return AIView(
        latest_anomaly=latest_anomaly_status(bundle),
        last_updated=format_timestamp(bundle.last_updated, tz_name) if bundle.last_updated else None,
        recent_anomalies=items,
        forecast_at=forecast_at,
        forecast_value=forecast_value,
        health=health_card,
        palette=health_palette(health.color if health else None),
    )


# Alerts

def build_alerts(
    snapshot: Optional[TelemetrySnapshot],
    bundle: Optional[MLBundle],
    tz_name: str,
    anomaly_limit: int,
) -> List[Alert]:
    alerts: List[Alert] = []

    if snapshot is not None:
        when = format_timestamp(snapshot.timestamp, tz_name) if snapshot.timestamp else None
        if has_error_code(snapshot.error_code):
            alerts.append(Alert(
                severity="critical", source="telemetry",
                message=f"Device reported error code {format_number(snapshot.error_code)}",
                timestamp=when,
            ))
        if to_float(snapshot.connectivity_status) == 0:
            alerts.append(Alert(
                severity="warning", source="telemetry",
                message="Device is offline", timestamp=when,
            ))

    if bundle is not None:
        health = bundle.health
        if health is not None and health.status in ("warning", "critical"):
            alerts.append(Alert(
                severity=health.status, source="health",
                message=health.summary or f"Health status is {health.status}",
                timestamp=format_timestamp(health.last_seen, tz_name) if health.last_seen else None,
            ))

        flagged = [row for row in bundle.anomaly if row.is_anomaly == ANOMALY_FLAG]
        for row in reversed(flagged[-anomaly_limit:] if anomaly_limit > 0 else []):
            alerts.append(Alert(
                severity="warning", source="anomaly",
                message="Anomaly detected in device telemetry",
                timestamp=format_timestamp(row.timestamp, tz_name),
            ))

    return alerts
