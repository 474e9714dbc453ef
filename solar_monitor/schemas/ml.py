from typing import List, Optional, Union
from datetime import datetime
from pydantic import BaseModel


class AnomalyRow(BaseModel):
    timestamp: str
    is_anomaly: int  # -1 anomalous, anything else normal


class Forecast(BaseModel):
    timestamp: str
    predicted_battery_pct: float


class HealthMetrics(BaseModel):
    battery_percentage: Optional[float] = None
    temperature: Optional[float] = None
    motor_speed: Optional[float] = None
    connectivity_status: Optional[int] = None
    error_code: Optional[Union[int, float]] = None


class HealthSummary(BaseModel):
    status: str  # good | warning | critical
    color: str  # green | yellow | red
    summary: str = ""
    last_seen: Optional[str] = None
    metrics: HealthMetrics = HealthMetrics()


# Everything one ML refresh produces
class MLBundle(BaseModel):
    anomaly: List[AnomalyRow] = []
    forecast: Optional[Forecast] = None
    health: Optional[HealthSummary] = None
    last_updated: Optional[datetime] = None
