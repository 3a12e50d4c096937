"""Configuration and logging setup."""

from .config import Settings, get_settings
from .log_config import configure_logging

__all__ = ["Settings", "configure_logging", "get_settings"]
