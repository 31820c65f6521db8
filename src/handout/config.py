"""Application configuration for the slide handout service.

Defaults mirror the production deployment: an 18 GB cap on rendered assets,
a 30 minute idle threshold and a converter reachable on the local network.
Every value can be overridden through ``HANDOUT_*`` environment variables or
a ``.env`` file.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

GIB = 1024 * 1024 * 1024
MIB = 1024 * 1024


def _default_storage_root() -> Path:
    return Path("public/uploads")


class AppConfig(BaseSettings):
    """Pydantic settings container shared by all components."""

    model_config = SettingsConfigDict(
        env_prefix="HANDOUT_",
        env_file=".env",
        extra="ignore",
    )

    storage_root: Path = Field(
        default_factory=_default_storage_root,
        description="Flat directory holding rendered slide images.",
    )
    public_url_prefix: str = Field(
        default="/uploads",
        description="URL prefix under which stored assets are served.",
    )
    max_storage_bytes: int = Field(
        default=18 * GIB,
        ge=1,
        description="Aggregate size of the asset store before uploads are refused.",
    )
    storage_warning_ratio: float = Field(
        default=0.8,
        gt=0.0,
        le=1.0,
        description="Usage ratio above which storage checks log a warning.",
    )
    idle_threshold_minutes: float = Field(
        default=30.0,
        gt=0.0,
        description="Minutes without access after which an asset may be evicted.",
    )
    sweep_interval_minutes: float = Field(
        default=10.0,
        ge=0.0,
        description="Period of the in-process eviction timer; 0 disables it.",
    )
    converter_base_url: str = Field(
        default="http://localhost:5012",
        min_length=1,
        description="Base address of the external rendering service.",
    )
    converter_submit_timeout_seconds: float = Field(
        default=120.0,
        gt=0.0,
        description="Upper bound for a single package conversion request.",
    )
    converter_fetch_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Upper bound for a single rendered image download.",
    )
    fetch_concurrency: int = Field(
        default=4,
        ge=1,
        le=32,
        description="Maximum number of slides fetched from the converter at once.",
    )
    max_upload_bytes: int = Field(
        default=200 * MIB,
        ge=1,
        description="Largest presentation package accepted by the ingest endpoint.",
    )
    upload_chunk_size_bytes: int = Field(
        default=1 * MIB,
        ge=1024,
        description="Chunk size used when streaming uploads.",
    )
    cron_secret: str = Field(
        default="cleanup-cron-job-secret",
        min_length=1,
        description="Shared secret expected by the scheduled cleanup trigger.",
    )
    asset_cache_max_age_seconds: int = Field(
        default=3600,
        ge=0,
        description="Client cache lifetime advertised for served assets.",
    )
    log_level: str = Field(
        default="INFO",
        description="Initial log level of the process.",
    )

    @property
    def idle_threshold(self) -> timedelta:
        return timedelta(minutes=self.idle_threshold_minutes)

    @property
    def sweep_interval_seconds(self) -> float:
        return self.sweep_interval_minutes * 60.0


def load_config() -> AppConfig:
    """Load configuration from the environment."""
    return AppConfig()


__all__ = ["AppConfig", "GIB", "MIB", "load_config"]
