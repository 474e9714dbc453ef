from typing import Any
from fastapi import APIRouter, Depends
from solar_monitor.api import deps
from solar_monitor.schemas import AIIntelligenceResponse
from solar_monitor.utils.dashboard import load_ai_intelligence
from solar_monitor.utils.ml_client import MLClient

router = APIRouter()


@router.get("", response_model=AIIntelligenceResponse)
async def get_ai_intelligence(
    ml: MLClient = Depends(deps.get_ml_client),
) -> Any:
    """
    Anomaly flags, battery forecast and health score, fetched fresh on every call
    """
    return await load_ai_intelligence(ml)
