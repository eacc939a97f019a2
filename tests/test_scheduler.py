"""
Sweep Scheduler Tests
=====================
Tests for the background quote sweep.
"""

import time

import pytest

from billing.jobs.scheduler import QuoteSweepScheduler
from billing.services.quotes import QuoteStore


def wait_for(condition, timeout: float = 3.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


class BrokenStore:
    def sweep(self) -> int:
        raise RuntimeError("table unavailable")

    def __len__(self) -> int:
        return 0


class TestQuoteSweepScheduler:
    """Tests for the sweep scheduler."""

    def test_run_sweep_evicts_expired(self, store: QuoteStore, clock):
        store.create_quote("old")
        clock.advance(301)
        store.create_quote("new")

        evicted = QuoteSweepScheduler(store).run_sweep()

        assert evicted == 1
        assert len(store) == 1

    def test_run_sweep_on_empty_store(self, store: QuoteStore):
        assert QuoteSweepScheduler(store).run_sweep() == 0

    def test_run_sweep_survives_failures(self):
        assert QuoteSweepScheduler(BrokenStore()).run_sweep() == 0

    def test_setup_registers_interval_job(self, store: QuoteStore):
        sweeper = QuoteSweepScheduler(store, interval_ms=60_000)

        sweeper.setup()

        job = sweeper.scheduler.get_job(QuoteSweepScheduler.JOB_ID)
        assert job is not None
        assert job.trigger.interval.total_seconds() == 60

    def test_rejects_non_positive_interval(self, store: QuoteStore):
        with pytest.raises(ValueError):
            QuoteSweepScheduler(store, interval_ms=0)

    def test_timer_sweeps_in_background(self, store: QuoteStore, clock):
        store.create_quote("expiring")
        clock.advance(301)
        assert len(store) == 1

        sweeper = store.start_sweeper(interval_ms=50)
        try:
            assert sweeper.running
            assert wait_for(lambda: len(store) == 0)
        finally:
            store.close()

        assert not sweeper.running

    def test_timer_keeps_fresh_quotes(self, store: QuoteStore):
        quote = store.create_quote("fresh")

        store.start_sweeper(interval_ms=20)
        try:
            time.sleep(0.2)
        finally:
            store.close()

        assert store.get_quote(quote.quote_id) is not None

    def test_start_and_stop_are_idempotent(self, store: QuoteStore):
        sweeper = QuoteSweepScheduler(store, interval_ms=60_000)

        sweeper.start()
        sweeper.start()
        assert sweeper.running

        sweeper.stop()
        sweeper.stop()
        assert not sweeper.running

    def test_restart_after_stop_keeps_sweeping(self, store: QuoteStore, clock):
        sweeper = QuoteSweepScheduler(store, interval_ms=30)
        sweeper.start()
        sweeper.stop()

        sweeper.start()
        try:
            assert sweeper.running
            store.create_quote("expiring")
            clock.advance(301)
            assert wait_for(lambda: len(store) == 0)
        finally:
            sweeper.stop()

    def test_stop_leaves_job_unconfigured(self, store: QuoteStore):
        sweeper = QuoteSweepScheduler(store, interval_ms=60_000)
        sweeper.start()

        sweeper.stop()

        assert sweeper.scheduler.get_job(QuoteSweepScheduler.JOB_ID) is None
