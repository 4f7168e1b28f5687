"""Configuration management for the survey ledger."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from survey_ledger.domain.value_objects import DEFAULT_INDEX_KEY, DEFAULT_PROBE_KEY


class LedgerConfig(BaseModel):
    """Well-known ledger key names."""

    index_key: str = Field(
        default=DEFAULT_INDEX_KEY, min_length=1, description="Key holding the record index"
    )
    probe_key: str = Field(
        default=DEFAULT_PROBE_KEY, min_length=1, description="Key written by the init operation"
    )


class StorageConfig(BaseModel):
    """Substrate configuration."""

    backend: Literal["memory", "file"] = Field(default="memory", description="Ledger backend")
    data_dir: Path = Field(
        default=Path("/var/lib/survey_ledger"), description="Data directory for the file backend"
    )


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, ge=1, le=65535, description="Server port")
    metrics_port: int = Field(default=8007, ge=1, le=65535, description="Prometheus metrics port")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="survey_ledger", description="Service name for tracing")


class Config(BaseSettings):
    """Main configuration for the survey ledger."""

    model_config = SettingsConfigDict(
        env_prefix="SURVEY_LEDGER_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    def ensure_directories(self) -> None:
        """Ensure the data directory exists when the file backend is selected."""
        if self.storage.backend == "file":
            self.storage.data_dir.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    config = Config()
    config.ensure_directories()
    return config
