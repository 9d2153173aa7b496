"""
Centralized Configuration Module using Pydantic Settings

This module provides type-safe, environment-based configuration for the
process hosting the field cache adapter: logging and remote client tuning.
Per-filter configuration (hosts, mappings, ttl, ...) lives in
`fieldcache.core.config.filter_config`.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Easy testing with override mechanisms
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    Architectural Decision: structlog for production-grade logging
    """

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class RemoteClientSettings(BaseSettings):
    """
    Tuning for the remote cache client libraries.

    Timeouts are enforced by the client library itself; the adapter adds
    none of its own.
    """

    CACHE_CONNECT_TIMEOUT: float = Field(default=2.0, description="Connect timeout in seconds")
    CACHE_SOCKET_TIMEOUT: float = Field(default=2.0, description="Socket read/write timeout in seconds")

    MEMCACHED_DEAD_TIMEOUT: float = Field(
        default=60.0, description="Seconds a failed memcached server stays out of the ring"
    )
    MEMCACHED_RETRY_ATTEMPTS: int = Field(
        default=2, description="Attempts against a memcached server before marking it dead"
    )

    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    Usage:
        from fieldcache.core.config.settings import get_settings

        settings = get_settings()
        level = settings.logging.LOG_LEVEL
        timeout = settings.remote.CACHE_SOCKET_TIMEOUT
    """

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    # Remote client settings
    CACHE_CONNECT_TIMEOUT: float = Field(default=2.0, description="Connect timeout in seconds")
    CACHE_SOCKET_TIMEOUT: float = Field(default=2.0, description="Socket read/write timeout in seconds")
    MEMCACHED_DEAD_TIMEOUT: float = Field(
        default=60.0, description="Seconds a failed memcached server stays out of the ring"
    )
    MEMCACHED_RETRY_ATTEMPTS: int = Field(
        default=2, description="Attempts against a memcached server before marking it dead"
    )
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @property
    def logging(self) -> LoggingSettings:
        """Get logging settings."""
        return LoggingSettings(LOG_LEVEL=self.LOG_LEVEL, LOG_FORMAT=self.LOG_FORMAT)

    @property
    def remote(self) -> RemoteClientSettings:
        """Get remote client settings."""
        return RemoteClientSettings(
            CACHE_CONNECT_TIMEOUT=self.CACHE_CONNECT_TIMEOUT,
            CACHE_SOCKET_TIMEOUT=self.CACHE_SOCKET_TIMEOUT,
            MEMCACHED_DEAD_TIMEOUT=self.MEMCACHED_DEAD_TIMEOUT,
            MEMCACHED_RETRY_ATTEMPTS=self.MEMCACHED_RETRY_ATTEMPTS,
            REDIS_DB=self.REDIS_DB,
            REDIS_PASSWORD=self.REDIS_PASSWORD,
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra environment variables
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    Returns:
        Settings: Global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings (useful for testing).

    Returns:
        Settings: New settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
