"""Configuration management for the job board."""

from .environment import DEFAULT_DATABASE_URL, EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config
from .models import AppConfig, BackfillConfig, LogFormat, LogLevel, LoggingConfig

__all__ = [
    # Loader functions
    "load_config",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "BackfillConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    "DEFAULT_DATABASE_URL",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
