"""
Quote Service
=============
In-memory, time-limited price quotes keyed by opaque ids.
"""

import secrets
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import structlog

from billing.config import Settings, get_settings
from billing.core.pricing import PricingCalculator, get_pricing_calculator
from billing.jobs.scheduler import QuoteSweepScheduler
from billing.schemas.quote import BillingFigures, QuoteResponse

logger = structlog.get_logger()

QUOTE_ID_PREFIX = "qt_"
QUOTE_ID_BYTES = 16
DEFAULT_QUOTE_TTL_MS = 300_000
MAX_ID_ATTEMPTS = 5


class QuoteIdCollisionError(RuntimeError):
    """Raised when no unused quote id could be minted."""


def new_quote_id() -> str:
    """Mint a quote id carrying 128 bits of randomness."""
    return QUOTE_ID_PREFIX + secrets.token_hex(QUOTE_ID_BYTES)


@dataclass(frozen=True)
class Quote:
    """A priced payload, honorable until its TTL elapses."""

    id: str
    figures: BillingFigures
    created_at: float

    def age(self, now: float) -> float:
        return now - self.created_at

    def is_expired(self, now: float, ttl: float) -> bool:
        return self.age(now) > ttl


class QuoteStore:
    """
    Table of issued quotes.

    Expired quotes are evicted lazily when read and in bulk by sweep().
    A single lock serializes every table operation.
    """

    def __init__(
        self,
        calculator: Optional[PricingCalculator] = None,
        ttl_ms: int = DEFAULT_QUOTE_TTL_MS,
        clock: Callable[[], float] = time.monotonic,
        id_factory: Callable[[], str] = new_quote_id,
    ):
        if ttl_ms <= 0:
            raise ValueError("ttl_ms must be > 0")
        self.calculator = calculator or get_pricing_calculator()
        self.ttl_ms = ttl_ms
        self._ttl = ttl_ms / 1000
        self._clock = clock
        self._id_factory = id_factory
        self._quotes: dict[str, Quote] = {}
        self._lock = threading.Lock()
        self._sweeper: Optional[QuoteSweepScheduler] = None

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "QuoteStore":
        """Build a store from settings, starting the sweeper if enabled."""
        config = config or get_settings()
        store = cls(calculator=PricingCalculator(config), ttl_ms=config.quote_ttl_ms)
        if config.sweep_enabled:
            store.start_sweeper(config.sweep_interval_ms)
        return store

    def create_quote(self, input_text: str) -> QuoteResponse:
        """
        Price a payload and issue a quote for it.

        Raises:
            QuoteIdCollisionError: If every minted id was already taken
        """
        figures = self.calculator.build_billing_info(input_text).figures()

        with self._lock:
            quote_id = self._mint_id()
            self._quotes[quote_id] = Quote(
                id=quote_id,
                figures=figures,
                created_at=self._clock(),
            )

        logger.info("Quote created", quote_id=quote_id, units=figures.units)
        return QuoteResponse(
            quote_id=quote_id,
            units=figures.units,
            estimated_cost=figures.estimated_cost,
            token_count=figures.token_count,
        )

    def _mint_id(self) -> str:
        # caller holds the lock
        for _ in range(MAX_ID_ATTEMPTS):
            quote_id = self._id_factory()
            if quote_id not in self._quotes:
                return quote_id
            logger.warning("Quote id collision, regenerating", quote_id=quote_id)
        raise QuoteIdCollisionError(
            f"Could not mint an unused quote id after {MAX_ID_ATTEMPTS} attempts"
        )

    def _take_fresh(self, quote_id: str, now: float) -> Optional[Quote]:
        # caller holds the lock
        quote = self._quotes.get(quote_id)
        if quote is None:
            return None
        if quote.is_expired(now, self._ttl):
            del self._quotes[quote_id]
            logger.info("Expired quote evicted on read", quote_id=quote_id)
            return None
        return quote

    def get_quote(self, quote_id: str) -> Optional[BillingFigures]:
        """Return the figures of a fresh quote, or None if absent or expired."""
        with self._lock:
            quote = self._take_fresh(quote_id, self._clock())
        return quote.figures if quote else None

    def delete_quote(self, quote_id: str) -> None:
        """Remove a quote if present."""
        with self._lock:
            self._quotes.pop(quote_id, None)

    def redeem_quote(self, quote_id: str) -> Optional[BillingFigures]:
        """
        Consume a fresh quote.

        Lookup and removal happen under one lock, so a quote can be
        redeemed at most once.
        """
        with self._lock:
            quote = self._take_fresh(quote_id, self._clock())
            if quote is not None:
                del self._quotes[quote_id]
        if quote is None:
            return None
        logger.info("Quote redeemed", quote_id=quote_id, units=quote.figures.units)
        return quote.figures

    def sweep(self) -> int:
        """
        Evict every expired quote.

        Returns:
            Number of quotes removed
        """
        with self._lock:
            now = self._clock()
            expired = [
                quote_id
                for quote_id, quote in self._quotes.items()
                if quote.is_expired(now, self._ttl)
            ]
            for quote_id in expired:
                del self._quotes[quote_id]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._quotes.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._quotes)

    def __contains__(self, quote_id: object) -> bool:
        with self._lock:
            return quote_id in self._quotes

    def start_sweeper(self, interval_ms: int = 60_000) -> QuoteSweepScheduler:
        """Start the background sweep; returns the running scheduler."""
        if self._sweeper is not None and self._sweeper.interval_ms != interval_ms:
            self._sweeper.stop()
            self._sweeper = None
        if self._sweeper is None:
            self._sweeper = QuoteSweepScheduler(self, interval_ms)
        self._sweeper.start()
        return self._sweeper

    @property
    def sweeper(self) -> Optional[QuoteSweepScheduler]:
        return self._sweeper

    def close(self) -> None:
        """Stop the background sweep, if any."""
        if self._sweeper is not None:
            self._sweeper.stop()
            self._sweeper = None

    def __enter__(self) -> "QuoteStore":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
