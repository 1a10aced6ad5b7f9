"""Service configuration and logging setup."""

import os
import sys

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from zoom_alert_proxy.batcher import MAX_ALERT_COUNTS
from zoom_alert_proxy.delivery import DEFAULT_HOOK_HOST, DEFAULT_TIMEOUT

LOG_FORMAT = "{time:YYYY-MM-DDTHH:mm:ss.SSS}Z [{extra[service]}] {level}: {message}"
SERVICE_NAME = "zoom-alert-proxy"


class Settings(BaseModel):
    """Proxy settings, defaulting from the environment.

    Environment values go through the same validation as explicit ones.
    """

    model_config = ConfigDict(validate_default=True)

    host: str = Field(
        default_factory=lambda: os.getenv("HOST", "0.0.0.0"),
        description="Listen address"
    )
    port: int = Field(
        default_factory=lambda: os.getenv("PORT") or 8080,
        description="Listen port"
    )
    hook_host: str = Field(
        default_factory=lambda: os.getenv("ZOOM_HOOK_HOST", DEFAULT_HOOK_HOST),
        description="Host of the Zoom incoming-webhook API"
    )
    batch_limit: int = Field(
        default_factory=lambda: os.getenv("MAX_ALERT_COUNTS") or MAX_ALERT_COUNTS,
        description="Maximum number of alerts per chat message",
        ge=1,
    )
    delivery_timeout: float = Field(
        default_factory=lambda: os.getenv("DELIVERY_TIMEOUT") or DEFAULT_TIMEOUT,
        description="Timeout in seconds for each outbound request",
        gt=0,
    )
    log_level: str = Field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"),
        description="Log level"
    )

    @field_validator('port')
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port range."""
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalise the log level name."""
        valid_levels = ['TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL']
        level = v.upper()
        if level not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return level


def configure_logging(level: str = "INFO") -> None:
    """Send loguru output to stdout with the service tag."""
    logger.remove()
    logger.add(sys.stdout, format=LOG_FORMAT, level=level)
    logger.configure(extra={"service": SERVICE_NAME})
