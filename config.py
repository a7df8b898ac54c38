"""Configuration management for the yaus URL shortener."""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field, model_validator


class Config(BaseSettings):
    """Application configuration."""

    # Storage settings
    short_db: Optional[str] = Field(
        default=None,
        description="Storage location: SQLite file path, postgresql:// URL, or unset for in-memory"
    )

    storage_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Upper bound for a single storage operation"
    )

    pool_max_size: int = Field(
        default=10,
        ge=1,
        description="Maximum PostgreSQL connection pool size"
    )

    # Redis settings (optional)
    redis_url: Optional[str] = Field(
        default=None,
        description="Redis connection URL for caching lookups"
    )

    cache_ttl_seconds: int = Field(
        default=3600,
        description="Cache TTL in seconds"
    )

    # Server settings
    host: str = Field(
        default="localhost",
        description="Host to bind to"
    )

    port: int = Field(
        default=3000,
        description="Port to listen on"
    )

    # Shortener settings
    base_url: str = Field(
        default="http://yaus.pw",
        description="Host prefix for generated short URLs"
    )

    path_prefix: str = Field(
        default="",
        description="Path prefix for short URLs (e.g., '/s' for /s/abc1234)"
    )

    locator_length: int = Field(
        default=7,
        ge=1,
        le=64,
        description="Length of the first candidate locator"
    )

    max_locator_length: int = Field(
        default=12,
        ge=1,
        le=64,
        description="Longest locator to fall back to on a digest prefix collision"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def check_locator_lengths(self) -> "Config":
        if self.max_locator_length < self.locator_length:
            raise ValueError("max_locator_length must be >= locator_length")
        return self


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
