"""Configuration management for URL shortener."""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Server settings
    host: str = Field(
        default="localhost",
        description="Host to bind to"
    )

    port: int = Field(
        default=8080,
        description="Port to listen on"
    )

    workers: int = Field(
        default=1,
        ge=1,
        description="Number of uvicorn worker processes. Use 1 with memory or file storage."
    )

    # Short URL settings
    base_url: str = Field(
        default="http://localhost:8080",
        description="Base address of the resulting shortened URLs"
    )

    path_prefix: str = Field(
        default="",
        description="Path prefix for short URLs (e.g., '/s' for /s/AbCd1234)"
    )

    owner_header: str = Field(
        default="X-User-ID",
        description="Header carrying the owner id set by the authenticating proxy"
    )

    max_generation_attempts: int = Field(
        default=10000,
        ge=1,
        description="Random id draws allowed for a single shorten call"
    )

    max_batch_generation_attempts: int = Field(
        default=100,
        ge=1,
        description="Random id draws allowed per batch item"
    )

    # Storage settings
    file_storage_path: Optional[str] = Field(
        default=None,
        description="JSON file for file-backed storage"
    )

    database_dsn: Optional[str] = Field(
        default=None,
        description="Postgres connection string; takes precedence over file storage"
    )

    db_pool_max_size: int = Field(
        default=10,
        ge=1,
        description="Maximum size of the Postgres connection pool"
    )

    db_command_timeout_seconds: int = Field(
        default=30,
        description="Postgres statement and connect timeout in seconds"
    )

    migrations_dir: Optional[str] = Field(
        default=None,
        description="Directory with SQL migrations (defaults to the bundled ones)"
    )

    # Redis settings (optional)
    redis_url: Optional[str] = Field(
        default=None,
        description="Redis connection URL for lookup caching"
    )

    cache_ttl_seconds: int = Field(
        default=3600,
        description="Cache TTL in seconds"
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


def load_config(**overrides) -> Config:
    """Load configuration from environment, with keyword overrides."""
    return Config(**overrides)
