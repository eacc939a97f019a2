"""
Unit Pricing Engine
===================
Converts text payloads into token estimates, billable units and charges.
"""

from decimal import ROUND_HALF_UP, Decimal, localcontext
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Union

import structlog
import yaml

from billing.config import Settings, get_settings
from billing.schemas.quote import BillingInfo, ToolPrice

logger = structlog.get_logger()

MAX_TOKENS_PER_UNIT = 4000
PRICE_PER_UNIT = Decimal("0.02")
AUTO_CHARGE_MAX_UNITS = 5
CHARS_PER_TOKEN = 4

CENT = Decimal("0.01")

Number = Union[int, float, Decimal]


def _require_int(value: Any, name: str) -> int:
    # bool is an int subclass but never a valid count
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    return value


def _to_decimal(value: Number, name: str) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    if not amount.is_finite():
        raise ValueError(f"{name} must be finite")
    return amount


def count_tokens(text: str) -> int:
    """Estimate the token count of a text as ceil(len / 4)."""
    if not isinstance(text, str):
        raise TypeError(f"text must be a string, got {type(text).__name__}")
    return (len(text) + CHARS_PER_TOKEN - 1) // CHARS_PER_TOKEN


def calculate_units(total_tokens: int, max_per_unit: int = MAX_TOKENS_PER_UNIT) -> int:
    """
    Convert a token count into billable units.

    Every request bills at least one unit, even for zero tokens.
    """
    _require_int(total_tokens, "total_tokens")
    _require_int(max_per_unit, "max_per_unit")
    if total_tokens < 0:
        raise ValueError("total_tokens must be >= 0")
    if max_per_unit <= 0:
        raise ValueError("max_per_unit must be > 0")
    return max(1, -(-total_tokens // max_per_unit))


def calculate_charge(units: int, price_per_unit: Number = PRICE_PER_UNIT) -> Decimal:
    """
    Calculate the charge for a number of units.

    Returns:
        Charge rounded half-up to whole cents
    """
    _require_int(units, "units")
    price = _to_decimal(price_per_unit, "price_per_unit")
    if units < 0:
        raise ValueError("units must be >= 0")
    if price < 0:
        raise ValueError("price_per_unit must be >= 0")
    digits = price.as_tuple()
    with localcontext() as ctx:
        # keep the product exact and leave room for the cents
        ctx.prec = max(ctx.prec, len(str(units)) + len(digits.digits) + max(0, digits.exponent) + 2)
        return (Decimal(units) * price).quantize(CENT, rounding=ROUND_HALF_UP)


def build_billing_info(
    input_text: str,
    max_tokens_per_unit: int = MAX_TOKENS_PER_UNIT,
    price_per_unit: Number = PRICE_PER_UNIT,
) -> BillingInfo:
    """Price a text payload end to end."""
    input_tokens = count_tokens(input_text)
    units = calculate_units(input_tokens, max_tokens_per_unit)
    total_charge = calculate_charge(units, price_per_unit)
    return BillingInfo(
        units=units,
        total_charge=total_charge,
        input_tokens=input_tokens,
        max_tokens_per_unit=max_tokens_per_unit,
    )


class PricingCalculator:
    """
    Unit pricing bound to configured rates.

    Loads per-tool unit pricing from YAML, falling back to built-in
    defaults when the file is missing or unreadable.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        tool_pricing_path: Optional[str] = None,
    ):
        config = config or get_settings()
        self.max_tokens_per_unit = config.max_tokens_per_unit
        self.price_per_unit = config.price_per_unit
        self.auto_charge_max_units = config.auto_charge_max_units
        self.tool_pricing_path = tool_pricing_path or config.tool_pricing_config_path
        self._tools: dict[str, ToolPrice] = {}
        self._load_tool_pricing()

    def _load_tool_pricing(self) -> None:
        """Load tool pricing configuration from YAML file."""
        config_file = Path(self.tool_pricing_path)

        if not config_file.exists():
            logger.warning("Tool pricing config not found, using defaults", path=self.tool_pricing_path)
            self._tools = self._get_default_tools()
            return

        try:
            with open(config_file) as f:
                data = yaml.safe_load(f) or {}
            self._tools = {
                name: ToolPrice(**(entry or {}))
                for name, entry in (data.get("tools") or {}).items()
            }
            logger.info("Loaded tool pricing", path=self.tool_pricing_path, tools=len(self._tools))
        except Exception as e:
            logger.error("Failed to load tool pricing", path=self.tool_pricing_path, error=str(e))
            self._tools = self._get_default_tools()

    def _get_default_tools(self) -> dict[str, ToolPrice]:
        """Return default tool pricing if config file is missing."""
        single = ToolPrice(units=1, external_cost=Decimal("0"))
        return {
            "check_email_safety": single,
            "check_url_safety": single,
            "check_response_safety": single,
            "analyze_email_thread": single,
            "check_attachment_safety": single,
            "check_sender_reputation": single,
            "check_message_safety": single,
            "check_media_authenticity_image": ToolPrice(units=4, external_cost=Decimal("0.03")),
            "check_media_authenticity_video": ToolPrice(units=10, external_cost=Decimal("0.15")),
        }

    def reload(self) -> None:
        """Reload tool pricing from file."""
        self._load_tool_pricing()

    @property
    def tools(self) -> dict[str, ToolPrice]:
        return dict(self._tools)

    def build_billing_info(self, input_text: str) -> BillingInfo:
        return build_billing_info(
            input_text,
            max_tokens_per_unit=self.max_tokens_per_unit,
            price_per_unit=self.price_per_unit,
        )

    def get_tool_units(self, tool_name: str) -> int:
        """Units billed per call of a tool; unknown tools bill one unit."""
        pricing = self._tools.get(tool_name)
        return pricing.units if pricing else 1

    def validate_cost_coverage(self, tool_name: str) -> bool:
        """
        Check that a tool's revenue covers its external cost.

        Unknown tools carry no external cost and are always covered.
        """
        pricing = self._tools.get(tool_name)
        if pricing is None:
            return True
        revenue = Decimal(pricing.units) * self.price_per_unit
        return revenue >= pricing.external_cost

    def requires_confirmation(self, units: int) -> bool:
        """Whether a charge of this size is above the auto-charge ceiling."""
        return _require_int(units, "units") > self.auto_charge_max_units


@lru_cache
def get_pricing_calculator() -> PricingCalculator:
    """Get cached pricing calculator instance."""
    return PricingCalculator()
