"""
Core Business Logic
====================
Token estimation and unit pricing calculations.
"""

from billing.core.pricing import (
    PricingCalculator,
    build_billing_info,
    calculate_charge,
    calculate_units,
    count_tokens,
    get_pricing_calculator,
)

__all__ = [
    "PricingCalculator",
    "build_billing_info",
    "calculate_charge",
    "calculate_units",
    "count_tokens",
    "get_pricing_calculator",
]
