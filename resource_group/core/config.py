"""
Configuration management for resource groups.

Settings are read from environment variables prefixed with ``RESOURCE_GROUP_``
and from an optional ``.env`` file. They only supply defaults: every value can
still be overridden per group at construction time.
"""

from functools import lru_cache

import structlog
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from resource_group.domain.exceptions import ConfigurationError
from resource_group.domain.policies import ErrorPolicy

logger = structlog.get_logger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Library-wide defaults."""

    ERROR_POLICY: ErrorPolicy = Field(
        default=ErrorPolicy.COLLECT,
        description="Default handler-failure policy for new groups (collect/log)"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Minimum structlog level when configure_logging() is used"
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Render log events as JSON instead of console output"
    )
    WARN_ON_USE_AFTER_FREE: bool = Field(
        default=True,
        description="Log a warning when items are added to an already freed group"
    )

    model_config = SettingsConfigDict(
        env_prefix="RESOURCE_GROUP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator('ERROR_POLICY', mode='before')
    @classmethod
    def normalize_error_policy(cls, v):
        """Accept policy names in any case."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize the log level name."""
        v = v.strip().upper()
        if v not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Load settings once; call ``get_settings.cache_clear()`` to reload."""
    try:
        settings = Settings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid resource group settings: {exc}") from exc

    logger.debug(
        "Settings loaded",
        error_policy=settings.ERROR_POLICY.value,
        log_level=settings.LOG_LEVEL,
        log_json=settings.LOG_JSON,
    )

    return settings


__all__ = ["Settings", "get_settings"]
