import logging
import os
import sys
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from datetime import datetime
from zoneinfo import ZoneInfo
from typing import Optional

from solar_monitor.core.config import settings

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL
}

class DisplayTimezoneFormatter(logging.Formatter):
    """
    Formatter that stamps records in the dashboard's display timezone
    """
    def __init__(self, fmt=None, datefmt=None, style='%', tz_name: str = "UTC"):
        super().__init__(fmt, datefmt, style)
        self.tz = ZoneInfo(tz_name)

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, tz=self.tz)
        if datefmt:
            return dt.strftime(datefmt)
        else:
            return dt.strftime("%Y-%m-%d %H:%M:%S %z")

def setup_logger(
    logger_name: str = "app",
    log_level: str = "info",
    log_to_console: bool = True,
    log_to_file: bool = True,
    log_file_path: Optional[str] = None,
    max_log_file_size: int = 10 * 1024 * 1024,  # 10MB
    log_file_backup_count: int = 5,
    rotate_logs_daily: bool = True
) -> logging.Logger:
    """
    Configure and return a logger instance

    Args:
        logger_name: Name of the logger
        log_level: Log level (debug, info, warning, error, critical)
        log_to_console: Whether to log to console
        log_to_file: Whether to log to file
        log_file_path: Path to log file
        max_log_file_size: Maximum size of log file before rotation
        log_file_backup_count: Number of backup log files to keep
        rotate_logs_daily: Whether to rotate logs daily

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)

    if logger.handlers:
        logger.handlers.clear()

    logger.setLevel(LOG_LEVELS.get(log_level.lower(), logging.INFO))

    log_format = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    formatter = DisplayTimezoneFormatter(log_format, tz_name=settings.DISPLAY_TIMEZONE)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_to_file:
        if not log_file_path:
            os.makedirs(settings.LOG_DIR, exist_ok=True)
            log_file_path = f"{settings.LOG_DIR}/{logger_name}.log"
        else:
            os.makedirs(os.path.dirname(log_file_path), exist_ok=True)

        if rotate_logs_daily:
            file_handler = TimedRotatingFileHandler(
                log_file_path,
                when='midnight',
                interval=1,
                backupCount=log_file_backup_count
            )
        else:
            file_handler = RotatingFileHandler(
                log_file_path,
                maxBytes=max_log_file_size,
                backupCount=log_file_backup_count
            )

        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Don't propagate to root logger
    logger.propagate = False

    return logger

# Main application logger
app_logger = setup_logger(
    logger_name="app",
    log_level=settings.LOG_LEVEL,
    log_to_file=settings.LOG_TO_FILE
)

# API request logger
api_logger = setup_logger(
    logger_name="api",
    log_level=settings.LOG_LEVEL,
    log_to_file=settings.LOG_TO_FILE
)

# DB operation logger
db_logger = setup_logger(
    logger_name="db",
    log_level=settings.LOG_LEVEL,
    log_to_file=settings.LOG_TO_FILE
)

# Upstream (telemetry / ML backend) logger
upstream_logger = setup_logger(
    logger_name="upstream",
    log_level=settings.LOG_LEVEL,
    log_to_file=settings.LOG_TO_FILE
)

def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name
    If a logger with this name already exists, it will be returned
    Otherwise, a new logger will be created and configured

    Args:
        name: Name of the logger

    Returns:
        Logger instance
    """
    existing_logger = logging.getLogger(name)

    if not existing_logger.handlers:
        if name == "app":
            return app_logger
        elif name == "api":
            return api_logger
        elif name == "db":
            return db_logger
        elif name == "upstream":
            return upstream_logger
        else:
            return setup_logger(
                logger_name=name,
                log_level=settings.LOG_LEVEL,
                log_to_file=settings.LOG_TO_FILE
            )

    return existing_logger
