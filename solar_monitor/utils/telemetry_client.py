from typing import Any, Dict, List, Optional

import aiohttp

from solar_monitor.utils.logger import get_logger
from solar_monitor.utils.upstream import build_url, fetch_json

logger = get_logger("upstream")

LIVE_DATA_PATH = "/api/fakedataRoutes/fake-data"
HISTORY_DATA_PATH = "/api/historyRoutes/machines/history"


class TelemetryClient:
    """Read-only client for the telemetry backend"""

    def __init__(self, session: aiohttp.ClientSession, base_url: str):
        self._session = session
        self.base_url = base_url

    async def get_live_data(self) -> Optional[Dict[str, Any]]:
        data = await fetch_json(self._session, build_url(self.base_url, LIVE_DATA_PATH))
        if data is not None and not isinstance(data, dict):
            logger.warning(f"Unexpected live data payload type: {type(data).__name__}")
            return None
        return data

    async def get_history_data(self) -> List[Dict[str, Any]]:
        data = await fetch_json(self._session, build_url(self.base_url, HISTORY_DATA_PATH))
        if not isinstance(data, list):
            if data is not None:
                logger.warning(f"Unexpected history payload type: {type(data).__name__}")
            return []
        return [row for row in data if isinstance(row, dict)]
