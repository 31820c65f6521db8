"""FastAPI application entry point."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

import uvicorn
from fastapi import FastAPI

from .config import AppConfig, load_config
from .dependencies import include_routers
from .lifecycle import run_periodic_sweep
from .logging import configure_logging

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    await _startup_sweeper(app)
    try:
        yield
    finally:
        await _shutdown_sweeper(app)


async def _startup_sweeper(app: FastAPI) -> None:
    config: AppConfig = app.state.config
    if getattr(app.state, "disable_sweeper", False) or config.sweep_interval_seconds <= 0:
        logger.info("Eviction timer startup skipped: disabled by configuration")
        return
    shutdown_event = asyncio.Event()
    app.state.sweeper_shutdown_event = shutdown_event
    app.state.sweeper_task = asyncio.create_task(
        run_periodic_sweep(
            sweeper=app.state.sweeper,
            shutdown_event=shutdown_event,
            interval_seconds=config.sweep_interval_seconds,
        ),
        name="handout-eviction-sweeper",
    )


async def _shutdown_sweeper(app: FastAPI) -> None:
    shutdown_event: asyncio.Event | None = getattr(app.state, "sweeper_shutdown_event", None)
    if shutdown_event is not None:
        shutdown_event.set()
    task: asyncio.Task[None] | None = getattr(app.state, "sweeper_task", None)
    if task is not None:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
    app.state.sweeper_task = None
    app.state.sweeper_shutdown_event = None


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build FastAPI instance with configured dependencies."""
    cfg = config or load_config()
    configure_logging(cfg.log_level)
    app = FastAPI(title="Slide Handout", lifespan=_lifespan)
    app.state.sweeper_task = None
    app.state.sweeper_shutdown_event = None
    include_routers(app, cfg)
    return app


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual launch
    uvicorn.run(app, host="0.0.0.0", port=8000)
