from typing import Any
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from solar_monitor.api import deps
from solar_monitor.core.config import settings
from solar_monitor.schemas import CacheStatusResponse
from solar_monitor.utils.cache import CACHE_KEYS, cache_status, invalidate, invalidate_all
from solar_monitor.utils.logger import get_logger

logger = get_logger("api.cache")

router = APIRouter()


@router.get("", response_model=CacheStatusResponse)
async def get_cache_status(db: AsyncSession = Depends(deps.get_async_db)) -> Any:
    entries = await cache_status(db, settings.CACHE_TTL_SECONDS)
    return CacheStatusResponse(ttl_seconds=settings.CACHE_TTL_SECONDS, entries=entries)


@router.delete("/{key}")
async def clear_cache_entry(key: str, db: AsyncSession = Depends(deps.get_async_db)) -> Any:
    """
    Drop one cached response so the next screen load refetches it
    """
    if key not in CACHE_KEYS:
        raise HTTPException(status_code=404, detail="Unknown cache key")
    removed = await invalidate(db, key)
    return {"key": key, "removed": removed}


@router.delete("")
async def clear_cache(db: AsyncSession = Depends(deps.get_async_db)) -> Any:
    removed = await invalidate_all(db)
    return {"removed": removed}
