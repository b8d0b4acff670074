"""Configuration schema models using Pydantic."""

from enum import Enum

from pydantic import BaseModel, Field


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class BackfillConfig(BaseModel):
    """Salary backfill settings."""

    batch_size: int = Field(
        100, ge=1, le=10000, description="Rows read and committed per transaction"
    )
    dry_run: bool = Field(False, description="Compute conversions without writing")


class AppConfig(BaseModel):
    """Root configuration object for the job board."""

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    backfill: BackfillConfig = Field(
        default_factory=BackfillConfig, description="Salary backfill settings"
    )

    model_config = {"extra": "forbid"}
