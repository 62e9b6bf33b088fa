"""
Background scheduler service for periodic jobs.

Reaps realtime sessions that stopped talking without the transport ever
reporting a disconnect. Uses APScheduler for in-process scheduling without
external dependencies.
"""

from __future__ import annotations

from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.core.config import Settings, get_settings
from app.core.logger import logger
from app.services.realtime_hub import RealtimeHub


class BackgroundScheduler:
    """
    Background scheduler for periodic jobs.

    Features:
    - Idle session reaping (every PRESENCE_REAP_INTERVAL_SECONDS)
    """

    def __init__(self, hub: RealtimeHub, settings: Optional[Settings] = None):
        self._hub = hub
        self._settings = settings or get_settings()
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None

    async def start(self):
        """Start the scheduler."""
        settings = self._settings

        # Only run scheduler in non-test environments
        if settings.is_test:
            logger.info("Background scheduler disabled in test environment")
            return
        if not settings.reaper_enabled:
            logger.info("Session reaper disabled (PRESENCE_SESSION_TIMEOUT_SECONDS=0)")
            return

        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            self._run_session_reaper,
            IntervalTrigger(seconds=settings.PRESENCE_REAP_INTERVAL_SECONDS),
            id="realtime_session_reaper",
            name="Realtime Session Reaper",
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info(
            "Background scheduler started:\n"
            f"  - Session reaper: every {settings.PRESENCE_REAP_INTERVAL_SECONDS}s, "
            f"timeout {settings.PRESENCE_SESSION_TIMEOUT_SECONDS}s"
        )

    async def stop(self):
        """Stop the scheduler."""
        if self._scheduler:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("Background scheduler stopped")

    async def _run_session_reaper(self) -> list[str]:
        reaped = self._hub.reap_idle(self._settings.PRESENCE_SESSION_TIMEOUT_SECONDS)
        if reaped:
            logger.info(f"Session reaper closed {len(reaped)} idle session(s)")
        return reaped


_scheduler: Optional[BackgroundScheduler] = None


async def start_background_scheduler(hub: RealtimeHub):
    """Start the global background scheduler."""
    global _scheduler
    if _scheduler is None:
        _scheduler = BackgroundScheduler(hub)
    await _scheduler.start()


async def stop_background_scheduler():
    """Stop the global background scheduler."""
    global _scheduler
    if _scheduler:
        await _scheduler.stop()
        _scheduler = None
