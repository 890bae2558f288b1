"""
Strata Cache - Configuration Schemas

Defines typed configuration models using Pydantic for validation and type safety.
All configuration must be defined here and validated at startup.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Environment(str, Enum):
    """Runtime environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class CacheBackend(str, Enum):
    """Supported cache backends."""

    MEMORY = "memory"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    TEXT = "text"


class CacheConfig(BaseModel):
    """Cache configuration."""

    backend: CacheBackend = Field(default=CacheBackend.MEMORY, description="Cache backend to use")
    max_size: int = Field(default=1024, ge=1, description="Max cache entries before LRU eviction")
    default_ttl_minutes: int = Field(
        default=60,
        ge=0,
        le=2**32 - 1,
        description="TTL applied when set() is called without ttl_minutes (0 = expire immediately)",
    )
    watch_poll_interval_seconds: float = Field(
        default=1.0,
        gt=0,
        description="How often the file watcher re-checks dependency files",
    )


class StrataConfig(BaseModel):
    """Root configuration for Strata Cache."""

    environment: Environment = Field(default=Environment.DEVELOPMENT, description="Runtime environment")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_format: LogFormat = Field(default=LogFormat.JSON, description="Log output format")

    cache: CacheConfig = Field(default_factory=CacheConfig)

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)
