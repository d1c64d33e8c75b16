"""
Settings for basecore services.

All values come from environment variables (or a local .env file).
"""

import functools
import os
import socket

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_consumer_name() -> str:
    return f"tracking-{socket.gethostname()}-{os.getpid()}"


class Settings(BaseSettings):
    """Service settings loaded from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Redis
    REDIS_URL: str = Field(default="redis://localhost:6379/0", description="Redis connection URL")

    # Logging
    SERVICE_NAME: str = Field(default="tracking-service", description="Service name for log records")
    LOG_LEVEL: str = Field(default="INFO", description="Root log level")
    LOG_FORMAT: str = Field(default="text", description="Log format (text or json)")

    # Streams
    TRACKING_INBOUND_STREAM: str = Field(default="dispatch.tracking")
    TRACKING_OUTBOUND_STREAM: str = Field(default="tracking.status")
    TRACKING_GROUP_NAME: str = Field(default="tracking.dispatch.consumer")
    TRACKING_CONSUMER_NAME: str = Field(default_factory=_default_consumer_name)
    TRACKING_STREAM_MAX_LEN: int = Field(default=100000, ge=1)

    # Worker loop
    TRACKING_BATCH_SIZE: int = Field(default=10, ge=1)
    TRACKING_BLOCK_MS: int = Field(default=5000, ge=0)
    TRACKING_RECLAIM_INTERVAL: int = Field(default=60, ge=1, description="Seconds between PEL reclaims")
    TRACKING_RECLAIM_IDLE_MS: int = Field(default=60000, ge=0)

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        fmt = v.lower()
        if fmt not in {"text", "json"}:
            raise ValueError(f"Invalid log format: {v}")
        return fmt


@functools.lru_cache()
def get_settings() -> Settings:
    """Get settings (cached)."""
    return Settings()
