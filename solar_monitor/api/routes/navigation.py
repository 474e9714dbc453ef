from typing import Any, List
from fastapi import APIRouter, HTTPException, Query
from solar_monitor.schemas import ParameterLocation, TabInfo
from solar_monitor.utils.navigation import TABS, find_parameter

router = APIRouter()


@router.get("/tabs", response_model=List[TabInfo])
def list_tabs() -> Any:
    return TABS


@router.get("/search", response_model=ParameterLocation)
def search_parameter(q: str = Query("", description="Parameter name or part of it")) -> Any:
    """
    Resolve a parameter name to the tab and element that displays it
    """
    if not q.strip():
        raise HTTPException(status_code=400, detail="Search query must not be empty")

    location = find_parameter(q)
    if location is None:
        raise HTTPException(status_code=404, detail="Parameter not found!")
    return location
