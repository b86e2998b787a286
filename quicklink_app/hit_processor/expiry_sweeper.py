"""
Expiry Sweeper

Background task that periodically deletes expired records store-wide.

Architecture:
- Runs as an asyncio task owned by the application lifespan
- Sleeps for a fixed interval, then calls RecordStore.sweep_expired()
- A failing sweep is logged and the schedule carries on
- stop() cancels the task while it sleeps; a sweep is synchronous,
  so one that has started always runs to completion
"""

import asyncio
import logging
from typing import Optional

from quicklink_app.storage.strategies import RecordStore

logger = logging.getLogger(__name__)


class ExpirySweeper:
    """
    Recurring expiry sweep over a record store.
    
    Tests can call run_once() directly instead of waiting on the timer.
    """
    
    def __init__(self, store: RecordStore, interval_seconds: float = 600):
        """
        Initialize sweeper with dependencies.
        
        Args:
            store: Record store to sweep
            interval_seconds: Delay between sweeps
        """
        self.store = store
        self.interval_seconds = interval_seconds
        self.running = False
        self.sweep_count = 0
        self.removed_count = 0
        self._task: Optional[asyncio.Task] = None
    
    def run_once(self) -> int:
        """
        Run a single sweep.
        
        Returns:
            Number of records removed (0 if the sweep failed)
        """
        try:
            removed = self.store.sweep_expired()
        except Exception:
            logger.exception("Error during expiry sweep")
            return 0
        
        self.sweep_count += 1
        self.removed_count += removed
        if removed:
            logger.info(f"Sweep removed {removed} expired URLs (total: {self.removed_count})")
        return removed
    
    def start(self) -> None:
        """Schedule the sweep loop on the running event loop"""
        if self._task is not None and not self._task.done():
            return
        
        self.running = True
        self._task = asyncio.create_task(self._run())
        logger.info(f"Expiry sweeper started (interval: {self.interval_seconds}s)")
    
    async def stop(self) -> None:
        """Cancel the schedule and wait for the task to finish"""
        self.running = False
        
        if self._task is None:
            return
        
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Expiry sweeper stopped")
    
    async def _run(self) -> None:
        while self.running:
            await asyncio.sleep(self.interval_seconds)
            self.run_once()
