"""Configuration management for the remote table handler."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from remote_table.domain.value_objects import Endpoint


class RowStoreConfig(BaseModel):
    """Remote row store endpoint configuration."""

    host: str = Field(default="127.0.0.1", min_length=1, description="Row store host")
    port: int = Field(default=8188, ge=1, le=65535, description="Row store port")
    connect_timeout_seconds: float = Field(
        default=5.0, gt=0, le=300, description="Connect timeout in seconds"
    )
    read_timeout_seconds: float = Field(
        default=30.0, gt=0, le=3600, description="Per-request read timeout in seconds"
    )

    def endpoint(self) -> Endpoint:
        """Build the immutable endpoint described by this configuration."""
        return Endpoint(
            host=self.host,
            port=self.port,
            connect_timeout=self.connect_timeout_seconds,
            read_timeout=self.read_timeout_seconds,
        )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    metrics_enabled: bool = Field(default=True, description="Record Prometheus metrics")
    metrics_port: int = Field(default=8001, ge=1, le=65535, description="Prometheus metrics port")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="remote_table", description="Service name for tracing")


class Config(BaseSettings):
    """Main configuration for the remote table handler."""

    model_config = SettingsConfigDict(
        env_prefix="REMOTE_TABLE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    row_store: RowStoreConfig = Field(default_factory=RowStoreConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
