"""Dependency wiring helpers."""

from __future__ import annotations

from fastapi import FastAPI

from .config import AppConfig
from .converter.converter_http import HttpRenderClient
from .ingest.ingest_api import router as ingest_router
from .ingest.ingest_service import IngestService
from .ingest.validation import UploadValidator
from .maintenance.maintenance_api import router as maintenance_router
from .maintenance.maintenance_service import MaintenanceService
from .media.access_refresher import AccessRefresher
from .media.asset_store import AssetStore
from .media.media_cleanup import EvictionSweeper
from .media.public_media_service import PublicMediaService
from .media.quota import QuotaGate
from .public.public_media_router import build_public_media_router
from .stats.stats_api import router as stats_router
from .stats.stats_service import StatsService


def include_routers(app: FastAPI, config: AppConfig) -> None:
    """Build components, attach them to ``app.state`` and mount routers."""
    store = AssetStore(root=config.storage_root)
    quota = QuotaGate(
        store=store,
        max_size_bytes=config.max_storage_bytes,
        warning_ratio=config.storage_warning_ratio,
    )
    sweeper = EvictionSweeper(store=store, idle_threshold=config.idle_threshold)
    converter = HttpRenderClient(
        base_url=config.converter_base_url,
        submit_timeout_seconds=config.converter_submit_timeout_seconds,
        fetch_timeout_seconds=config.converter_fetch_timeout_seconds,
    )
    validator = UploadValidator(
        max_upload_bytes=config.max_upload_bytes,
        chunk_size_bytes=config.upload_chunk_size_bytes,
    )
    ingest_service = IngestService(
        converter=converter,
        store=store,
        quota=quota,
        validator=validator,
        sweeper=sweeper,
        public_url_prefix=config.public_url_prefix,
        fetch_concurrency=config.fetch_concurrency,
    )
    public_media_service = PublicMediaService(
        refresher=AccessRefresher(store=store),
        cache_max_age_seconds=config.asset_cache_max_age_seconds,
    )

    app.state.config = config
    app.state.asset_store = store
    app.state.sweeper = sweeper
    app.state.cron_secret = config.cron_secret
    app.state.ingest_service = ingest_service
    app.state.maintenance_service = MaintenanceService(quota=quota, sweeper=sweeper)
    app.state.stats_service = StatsService(
        store=store,
        max_size_bytes=config.max_storage_bytes,
        idle_threshold=config.idle_threshold,
    )

    app.include_router(ingest_router)
    app.include_router(maintenance_router)
    app.include_router(stats_router)
    app.include_router(
        build_public_media_router(public_media_service, prefix=config.public_url_prefix)
    )
