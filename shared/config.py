"""
Shared configuration management for the route client.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_cache_dir() -> Path:
    return Path.home() / ".cache" / "route_client"


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="ROUTE_CLIENT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Logging
    log_level: str = Field(default="info")

    # Observability
    enable_metrics: bool = Field(default=False)


class RouteClientConfig(BaseConfig):
    """Route client configuration."""

    service_name: str = Field(default="route_client")

    # Transport
    request_timeout: float = Field(default=30.0, gt=0)
    follow_redirects: bool = Field(default=True)

    # Memory tier (0 disables the bound)
    memory_cache_max_entries: int = Field(default=256, ge=0)
    memory_cache_max_bytes: int = Field(default=32 * 1024 * 1024, ge=0)

    # Disk tier (0 disables eviction)
    cache_dir: Path = Field(default_factory=_default_cache_dir)
    cache_namespace: str = Field(default="")
    disk_cache_max_bytes: int = Field(default=0, ge=0)

    @property
    def disk_cache_path(self) -> Path:
        """Directory holding the disk tier's records."""
        if self.cache_namespace:
            return self.cache_dir / self.cache_namespace
        return self.cache_dir


def get_config(**overrides) -> RouteClientConfig:
    """Get route client configuration, environment first, then overrides."""
    return RouteClientConfig(**overrides)
