"""
Quote Sweep Scheduler
=====================
APScheduler-based background sweep of expired quotes.
"""

from typing import TYPE_CHECKING

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
import structlog

if TYPE_CHECKING:
    from billing.services.quotes import QuoteStore

logger = structlog.get_logger()


class QuoteSweepScheduler:
    """
    Periodically evicts expired quotes from a store.

    Runs on its own background thread until stopped.
    """

    JOB_ID = "quote_sweep"

    def __init__(self, store: "QuoteStore", interval_ms: int = 60_000):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be > 0")
        self.store = store
        self.interval_ms = interval_ms
        self.scheduler = BackgroundScheduler()
        self._configured = False

    def run_sweep(self) -> int:
        """Execute one sweep pass."""
        try:
            evicted = self.store.sweep()
            if evicted:
                logger.info("Quote sweep completed", evicted=evicted, remaining=len(self.store))
            else:
                logger.debug("Quote sweep completed", evicted=0, remaining=len(self.store))
            return evicted
        except Exception as e:
            logger.error("Quote sweep failed", error=str(e))
            return 0

    def setup(self) -> None:
        """Configure the sweep job."""
        self.scheduler.add_job(
            self.run_sweep,
            IntervalTrigger(seconds=self.interval_ms / 1000),
            id=self.JOB_ID,
            name="Expired Quote Sweep",
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        self._configured = True
        logger.info("Sweep scheduler configured", interval_ms=self.interval_ms)

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def start(self) -> None:
        """Start the scheduler."""
        if self.running:
            return
        if not self._configured:
            self.setup()
        self.scheduler.start()
        logger.info("Sweep scheduler started")

    def stop(self) -> None:
        """Stop the scheduler."""
        if not self.running:
            return
        self.scheduler.shutdown(wait=False)
        # a shut down scheduler has lost its executors and cannot be restarted
        self.scheduler = BackgroundScheduler()
        self._configured = False
        logger.info("Sweep scheduler stopped")
