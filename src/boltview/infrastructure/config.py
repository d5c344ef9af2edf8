"""Configuration management for boltview."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineConfig(BaseModel):
    """Storage engine configuration."""

    max_buckets: int = Field(
        default=256, ge=1, le=65535, description="Minimum bucket handle limit; raised to fit the file"
    )
    map_size: int = Field(
        default=10485760, ge=1048576, description="Memory map size in bytes (default 10MB)"
    )
    lock: bool = Field(default=True, description="Use the engine lock file")
    sync: bool = Field(default=True, description="Flush to disk on commit")
    readahead: bool = Field(default=True, description="Let the OS read ahead the data file")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="console", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="boltview", description="Service name for tracing")
    metrics_textfile: Path | None = Field(
        default=None, description="Write Prometheus metrics to this file after each run"
    )


class Config(BaseSettings):
    """Main configuration for boltview."""

    model_config = SettingsConfigDict(
        env_prefix="BOLTVIEW_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    engine: EngineConfig = Field(default_factory=EngineConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
