"""
Shared GET helper for the telemetry and ML backends.

Every failure mode ends at this boundary: a non-OK status, a transport error,
a timeout or a body that is not JSON is logged and reported as ``None``.
Nothing is retried; the next poll or a manual refresh tries again.
"""
import asyncio
from typing import Any, Optional

import aiohttp
from aiohttp import ClientTimeout

from solar_monitor.core.config import settings
from solar_monitor.utils.logger import get_logger

logger = get_logger("upstream")


def build_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def create_session() -> aiohttp.ClientSession:
    return aiohttp.ClientSession(
        timeout=ClientTimeout(total=settings.HTTP_TIMEOUT_SECONDS),
        headers={"Accept": "application/json"},
    )


async def fetch_json(session: aiohttp.ClientSession, url: str) -> Optional[Any]:
    """GET url and decode the JSON body; None on any failure"""
    try:
        async with session.get(url) as response:
            if not response.ok:
                logger.warning(f"Upstream returned {response.status} for {url}")
                return None
            return await response.json(content_type=None)
    except asyncio.TimeoutError:
        logger.error(f"Upstream request timed out: {url}")
    except aiohttp.ClientError as e:
        logger.error(f"Upstream request failed: {url} | Error: {str(e)}")
    except ValueError as e:
        logger.error(f"Upstream returned invalid JSON: {url} | Error: {str(e)}")
    return None
