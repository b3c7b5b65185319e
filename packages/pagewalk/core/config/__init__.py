"""Configuration management for pagewalk."""

from pagewalk.core.config.loader import (
    API_TOKEN_ENV_VAR,
    configure_logging,
    detect_format,
    load_app_config,
    load_config,
)
from pagewalk.core.config.models import AppConfig, EndpointConfig, LoggingConfig

__all__ = [
    "API_TOKEN_ENV_VAR",
    "AppConfig",
    "EndpointConfig",
    "LoggingConfig",
    "configure_logging",
    "detect_format",
    "load_app_config",
    "load_config",
]
