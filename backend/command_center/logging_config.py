import logging
import os
from logging.config import dictConfig
from typing import Any, Dict, Optional

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
TELEMETRY_LOGGER = "command_center.telemetry"
QUIET_LOGGERS = ("sqlalchemy.engine", "alembic.runtime.migration")
HTTP_LOGGERS = ("httpx", "uvicorn.access")


def _env_level(name: str, default: str) -> str:
    return os.getenv(name, default).strip().upper() or default


def configure_logging(level: Optional[str] = None) -> None:
    """Configure process-wide logging.

    ``MBA_LOG_LEVEL`` sets the root level and ``MBA_TELEMETRY_LOG_LEVEL`` the
    level of telemetry ``EVENT`` lines. ``MBA_DEBUG_SQL=1`` logs SQL
    statements and ``MBA_DEBUG_HTTP=1`` logs outbound HTTP traffic.
    """
    loggers: Dict[str, Dict[str, Any]] = {name: {"level": "WARNING"} for name in QUIET_LOGGERS}
    loggers[TELEMETRY_LOGGER] = {"level": _env_level("MBA_TELEMETRY_LOG_LEVEL", "INFO")}
    if os.getenv("MBA_DEBUG_SQL", "0") == "1":
        loggers["sqlalchemy.engine"] = {"level": "INFO"}

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": DEFAULT_LOG_FORMAT},
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {
                "handlers": ["default"],
                "level": (level or _env_level("MBA_LOG_LEVEL", "INFO")).upper(),
            },
            "loggers": loggers,
        }
    )

    if os.getenv("MBA_DEBUG_HTTP", "0") == "1":
        for name in HTTP_LOGGERS:
            logging.getLogger(name).setLevel(logging.DEBUG)
