"""
Expired URL Cleanup Worker

Periodically sweeps the store and evicts records whose validity has lapsed.

Lookups already evict expired records lazily, so the sweep is never needed
for correctness. It bounds memory held by short URLs nobody requests again.
The application lifespan runs it as a background task.

A swept record is gone without a trace, so a redirect to it answers 404.
Only the lookup that itself evicts an expired record answers 410, which
means 410 is seen only between expiry and the next sweep.
"""

import asyncio
import logging

from shorturl_service.store.strategies import ShortURLStore

logger = logging.getLogger(__name__)


class CleanupWorker:
    """
    Cleanup worker with a fixed sweep interval.

    Each sweep goes through the store's cleanup_expired(), which takes the
    same shard locks as every other store operation.
    """

    def __init__(self, store: ShortURLStore, interval_seconds: float = 60):
        """
        Initialize worker with dependencies.

        Args:
            store: Store to sweep
            interval_seconds: Pause between sweeps
        """
        if interval_seconds <= 0:
            raise ValueError(f"Sweep interval must be positive (given value: {interval_seconds})")
        self.store = store
        self.interval_seconds = interval_seconds
        self.running = False
        self.sweep_count = 0
        self.evicted_count = 0

    async def start(self):
        """Run sweeps until stopped or cancelled"""
        self.running = True
        logger.info("Cleanup worker started (interval: %ss)", self.interval_seconds)

        while self.running:
            try:
                await asyncio.sleep(self.interval_seconds)
                if self.running:
                    self.sweep()
            except asyncio.CancelledError:
                logger.info("Cleanup worker task cancelled.")
                break
            except Exception:
                # Keep sweeping; the next pass retries the same records
                logger.exception("Cleanup sweep failed")

        self.running = False
        logger.info("Cleanup worker stopped after %d sweeps (%d URLs evicted)", self.sweep_count, self.evicted_count)

    def sweep(self) -> int:
        """Run one sweep now; returns how many records were evicted"""
        evicted = self.store.cleanup_expired()
        self.sweep_count += 1
        self.evicted_count += evicted

        if evicted:
            stats = self.store.stats()
            logger.info(
                "Evicted %d expired URLs (%d URLs and %d clicks still held)",
                evicted, stats.total_urls, stats.total_clicks
            )
        return evicted

    def stop(self):
        """Stop the worker after the current sleep"""
        self.running = False
