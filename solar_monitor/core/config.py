from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Solar Plant Monitor"

    # Upstream services
    TELEMETRY_API_BASE: str = "http://localhost:5000"
    ML_API_BASE: str = "http://localhost:8000"
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # Database (local response cache)
    ASYNC_DATABASE_URL: str = "sqlite+aiosqlite:///./solar_monitor.db"

    # Cache / polling
    CACHE_TTL_SECONDS: int = 15 * 60
    LIVE_POLL_INTERVAL_SECONDS: float = 30.0

    # Display
    HISTORY_TABLE_LIMIT: int = 20
    ANOMALY_LIST_LIMIT: int = 10
    DISPLAY_TIMEZONE: str = "UTC"
    DEFAULT_TAB: str = "live-status"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "info"
    LOG_DIR: str = "./logs"
    LOG_TO_FILE: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

settings = Settings()
