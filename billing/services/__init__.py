"""
Business Services
=================
"""

from billing.services.quotes import Quote, QuoteIdCollisionError, QuoteStore

__all__ = ["Quote", "QuoteIdCollisionError", "QuoteStore"]
