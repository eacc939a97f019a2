"""
Billing Quotes
==============
Unit pricing for text payloads and short-lived price quotes.
"""

from billing.core.pricing import (
    PricingCalculator,
    build_billing_info,
    calculate_charge,
    calculate_units,
    count_tokens,
)
from billing.jobs.scheduler import QuoteSweepScheduler
from billing.schemas.quote import BillingFigures, BillingInfo, QuoteResponse
from billing.services.quotes import Quote, QuoteIdCollisionError, QuoteStore

__version__ = "1.0.0"

__all__ = [
    "BillingFigures",
    "BillingInfo",
    "PricingCalculator",
    "Quote",
    "QuoteIdCollisionError",
    "QuoteResponse",
    "QuoteStore",
    "QuoteSweepScheduler",
    "build_billing_info",
    "calculate_charge",
    "calculate_units",
    "count_tokens",
]
