"""Lifecycle helpers wiring the eviction timer into FastAPI startup."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from .media.asset_store import utc_now
from .media.media_cleanup import EvictionSweeper
from .media.media_models import SweepReport

logger = logging.getLogger(__name__)


def sweep_once(
    *,
    sweeper: EvictionSweeper,
    now: datetime | None = None,
) -> SweepReport:
    """Run a single eviction iteration and return its report."""
    return sweeper.sweep(now=now or utc_now())


async def run_periodic_sweep(
    *,
    sweeper: EvictionSweeper,
    shutdown_event: asyncio.Event,
    interval_seconds: float = 600.0,
    clock: Callable[[], datetime] | None = None,
) -> None:
    """Execute eviction sweeps until ``shutdown_event`` is signalled."""
    interval = max(1.0, float(interval_seconds))
    tick = clock or utc_now
    while not shutdown_event.is_set():
        try:
            report = await asyncio.to_thread(sweep_once, sweeper=sweeper, now=tick())
        except Exception:
            logger.exception("media.sweep.iteration_failed")
        else:
            if report.deleted:
                logger.info(
                    "Evicted %s assets (%s bytes) during scheduled sweep",
                    len(report.deleted),
                    report.bytes_freed,
                )
        try:
            await asyncio.wait_for(shutdown_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            continue


__all__ = ["run_periodic_sweep", "sweep_once"]
