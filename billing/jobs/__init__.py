"""
Background Jobs
================
Scheduled maintenance of the quote table.
"""

from billing.jobs.scheduler import QuoteSweepScheduler

__all__ = ["QuoteSweepScheduler"]
