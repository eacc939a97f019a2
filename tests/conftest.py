"""
Test Configuration
==================
Pytest fixtures for billing tests.
"""

from collections.abc import Generator
from pathlib import Path

import pytest

from billing.config import Settings
from billing.core.pricing import PricingCalculator
from billing.services.quotes import QuoteStore

TOOL_PRICING_PATH = Path(__file__).resolve().parent.parent / "config" / "tool_pricing.yaml"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with defaults and the bundled tool pricing table."""
    return Settings(
        _env_file=None,
        sweep_enabled=False,
        tool_pricing_config_path=str(TOOL_PRICING_PATH),
    )


@pytest.fixture
def calculator(test_settings: Settings) -> PricingCalculator:
    return PricingCalculator(test_settings)


@pytest.fixture
def store(calculator: PricingCalculator, clock: FakeClock) -> Generator[QuoteStore, None, None]:
    """Quote store with a 5 minute TTL driven by the fake clock."""
    quote_store = QuoteStore(calculator=calculator, ttl_ms=300_000, clock=clock)
    yield quote_store
    quote_store.close()
