"""Configuration loading and validation."""

from .models import SystemConfig, ReaderConfig, BotConfig
from .loader import ConfigLoader, ConfigLoadError, ConfigValidationError

__all__ = [
    "SystemConfig",
    "ReaderConfig",
    "BotConfig",
    "ConfigLoader",
    "ConfigLoadError",
    "ConfigValidationError",
]
