"""Pydantic configuration models for all service settings."""

from __future__ import annotations

from pydantic import BaseModel, Field

from campus_telemetry.catalog.defaults import default_campuses
from campus_telemetry.catalog.models import Campus


class ServerConfig(BaseModel):
    name: str = "Grevo Mock Backend"
    host: str = "0.0.0.0"
    port: int = Field(8000, ge=1, le=65535)  # PORT env var overrides at startup
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    sse_keepalive_seconds: float = Field(15.0, gt=0)


class BroadcastConfig(BaseModel):
    interval_seconds: float = Field(5.0, gt=0)
    outbox_size: int = Field(100, ge=1)  # Queued samples per observer before faults
    max_consecutive_faults: int = Field(3, ge=1)


class APIConfig(BaseModel):
    default_campus_id: str = "campus-1"
    default_limit: int = Field(10, ge=0)
    max_energy_data_limit: int = Field(1000, ge=0)


class CatalogConfig(BaseModel):
    campuses: list[Campus] = Field(default_factory=default_campuses)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"
    file: str = ""


class AppConfig(BaseModel):
    """Root configuration model containing all service settings."""

    server: ServerConfig = ServerConfig()
    broadcast: BroadcastConfig = BroadcastConfig()
    api: APIConfig = APIConfig()
    catalog: CatalogConfig = CatalogConfig()
    logging: LoggingConfig = LoggingConfig()
