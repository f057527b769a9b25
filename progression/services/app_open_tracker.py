"""
Background app-open time tracker.

Adds one minute of app-open time to the current week every
APP_OPEN_TICK_SECONDS while the app is running. Writes go through the
progress store's mutation lock like every other change.
"""

import asyncio
import logging

from progression.config import APP_OPEN_TICK_SECONDS
from progression.services.progress_service import ProgressStore

logger = logging.getLogger(__name__)


class AppOpenTracker:
    """
    Background task that accumulates app_open_minutes_this_week.
    """

    def __init__(self, store: ProgressStore, interval: float = APP_OPEN_TICK_SECONDS):
        """
        Initialize app-open tracker.

        Args:
            store: Progress store to record minutes on
            interval: Seconds between ticks
        """
        self.store = store
        self.interval = interval
        self._running = False
        self._task = None

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self):
        """Start the background tracking task."""
        if self._running:
            logger.warning("App-open tracker is already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._tick_loop())
        logger.info(f"App-open tracker started (interval: {self.interval}s)")

    async def stop(self):
        """Stop the background tracking task."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info("App-open tracker stopped")

    async def _tick_loop(self):
        """Main tracking loop; the first minute is recorded after one full interval."""
        while self._running:
            await asyncio.sleep(self.interval)
            result = await self.store.record_app_open_minute()
            if not result.success:
                logger.error(f"Failed to record app-open minute: {result.error}")
