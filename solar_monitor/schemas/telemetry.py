from typing import Any, Optional
from pydantic import BaseModel


# One device snapshot as served by the telemetry backend.
# Fields are kept as sent; views convert and format them, so an oddly typed
# value shows up as-is instead of discarding the whole snapshot.
class TelemetrySnapshot(BaseModel):
    total_runtime: Optional[Any] = None
    battery_percentage: Optional[Any] = None  # raw 0..255
    running_current: Optional[Any] = None
    avg_current: Optional[Any] = None
    motor_speed: Optional[Any] = None
    connectivity_status: Optional[Any] = None
    device_id: Optional[Any] = None
    device_state: Optional[Any] = None
    fw_version: Optional[Any] = None
    temperature: Optional[Any] = None
    humidity: Optional[Any] = None
    voltage_battery: Optional[Any] = None
    voltage_solar_panel: Optional[Any] = None
    panel_location: Optional[Any] = None
    error_code: Optional[Any] = None
    dbg_accel_output: Optional[Any] = None
    dbg_gyro_output: Optional[Any] = None
    dbg_motor_status_0: Optional[Any] = None
    dbg_motor_status_1: Optional[Any] = None
    general_status: Optional[Any] = None
    timestamp: Optional[Any] = None  # ISO 8601 string or epoch seconds / milliseconds

    class Config:
        extra = "allow"


# History records share the snapshot shape
class HistoryRecord(TelemetrySnapshot):
    pass
