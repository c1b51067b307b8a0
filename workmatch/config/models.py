"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_DATABASE_URL = "sqlite:///./data/workmatch.db"


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


class DatabaseConfig(BaseModel):
    """Relational store settings."""

    url: Optional[str] = Field(
        None, description="SQLAlchemy database URL (DATABASE_URL overrides it)"
    )
    echo: bool = Field(False, description="Log every SQL statement")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        """Require a dialect prefix such as sqlite:/// or postgresql://."""
        if v is None:
            return None
        stripped = v.strip()
        if not stripped:
            return None
        if "://" not in stripped:
            raise ValueError(f"database url must look like dialect://..., got: {stripped}")
        return stripped


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for WorkMatch.

    Every section is optional; an empty or missing config file yields
    defaults.
    """

    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    model_config = {"extra": "ignore"}

    def resolve_database_url(self, override: Optional[str] = None) -> str:
        """Pick the database URL: override, then config file, then default."""
        return override or self.database.url or DEFAULT_DATABASE_URL
