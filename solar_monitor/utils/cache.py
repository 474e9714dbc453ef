"""
Expiring response cache backed by the ``cached_responses`` table.

A cached payload younger than the TTL is served without touching the
network. Once it is stale the fetcher is called once; a successful result
replaces the cached one, a failed or empty fetch leaves the cache as it was
and is returned to the caller as missing data.
"""
import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from solar_monitor.crud import cached_response
from solar_monitor.schemas.dashboard import CacheEntryStatus
from solar_monitor.utils.logger import get_logger

logger = get_logger("app.cache")

LIVE_DATA_KEY = "liveData"
REPORT_DATA_KEY = "reportData"
HISTORY_DATA_KEY = "historyData"

CACHE_KEYS = (LIVE_DATA_KEY, REPORT_DATA_KEY, HISTORY_DATA_KEY)

Fetcher = Callable[[], Awaitable[Optional[Any]]]
Clock = Callable[[], float]

_key_locks: Dict[str, asyncio.Lock] = {}


def _lock_for(key: str) -> asyncio.Lock:
    lock = _key_locks.get(key)
    if lock is None:
        lock = _key_locks[key] = asyncio.Lock()
    return lock


def is_fresh(fetched_at: float, now: float, ttl_seconds: float) -> bool:
    return now - fetched_at < ttl_seconds


async def get_cached(
    db: AsyncSession, key: str, ttl_seconds: float, clock: Clock = time.time
) -> Optional[Any]:
    """Payload for key if it is still fresh, otherwise None"""
    entry = await cached_response.get_by_key(db, key=key)
    if entry is not None and is_fresh(entry.fetched_at, clock(), ttl_seconds):
        return entry.payload
    return None


async def get_or_fetch(
    db: AsyncSession,
    key: str,
    fetcher: Fetcher,
    ttl_seconds: float,
    clock: Clock = time.time,
) -> Optional[Any]:
    payload = await get_cached(db, key, ttl_seconds, clock)
    if payload is not None:
        logger.debug(f"Cache hit for {key}")
        return payload

    async with _lock_for(key):
        # Another request may have refreshed the entry while we waited
        payload = await get_cached(db, key, ttl_seconds, clock)
        if payload is not None:
            return payload

        now = clock()
        logger.info(f"Cache miss for {key}, fetching from upstream")
        payload = await fetcher()
        if not payload:
            logger.warning(f"Upstream returned no data for {key}; cache left unchanged")
            return None

        await cached_response.upsert(db, key=key, payload=payload, fetched_at=now)
        return payload


async def cache_status(
    db: AsyncSession, ttl_seconds: float, clock: Clock = time.time
) -> List[CacheEntryStatus]:
    now = clock()
    return [
        CacheEntryStatus(
            key=entry.key,
            fetched_at=datetime.fromtimestamp(entry.fetched_at, tz=timezone.utc),
            age_seconds=round(max(0.0, now - entry.fetched_at), 3),
            fresh=is_fresh(entry.fetched_at, now, ttl_seconds),
        )
        for entry in await cached_response.get_multi(db)
    ]


async def invalidate(db: AsyncSession, key: str) -> bool:
    removed = await cached_response.remove(db, key=key)
    if removed:
        logger.info(f"Cache entry {key} invalidated")
    return removed


async def invalidate_all(db: AsyncSession) -> int:
    count = await cached_response.remove_all(db)
    logger.info(f"Cache cleared ({count} entries)")
    return count
