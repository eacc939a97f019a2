"""
Pydantic Schemas
================
Data models for pricing and quotes.
"""

from billing.schemas.quote import (
    BillingFigures,
    BillingInfo,
    QuoteResponse,
    ToolPrice,
)

__all__ = [
    "BillingFigures",
    "BillingInfo",
    "QuoteResponse",
    "ToolPrice",
]
