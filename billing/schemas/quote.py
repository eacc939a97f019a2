"""
Quote Schemas
=============
Pydantic models for billing figures and issued quotes.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class BillingFigures(BaseModel):
    """
    Priced view of a text payload.
    Immutable once computed for a given input.
    """

    model_config = ConfigDict(frozen=True)

    token_count: int = Field(..., ge=0)
    units: int = Field(..., ge=1)
    estimated_cost: Decimal = Field(..., ge=0)


class BillingInfo(BaseModel):
    """Billing summary returned to callers pricing a payload."""

    model_config = ConfigDict(frozen=True)

    units: int = Field(..., ge=1)
    total_charge: Decimal = Field(..., ge=0)
    input_tokens: int = Field(..., ge=0)
    max_tokens_per_unit: int = Field(..., gt=0)

    def figures(self) -> BillingFigures:
        return BillingFigures(
            token_count=self.input_tokens,
            units=self.units,
            estimated_cost=self.total_charge,
        )


class QuoteResponse(BaseModel):
    """Response for a newly issued quote."""

    model_config = ConfigDict(frozen=True)

    quote_id: str = Field(..., min_length=1)
    units: int = Field(..., ge=1)
    estimated_cost: Decimal = Field(..., ge=0)
    token_count: int = Field(..., ge=0)

    def figures(self) -> BillingFigures:
        return BillingFigures(
            token_count=self.token_count,
            units=self.units,
            estimated_cost=self.estimated_cost,
        )


class ToolPrice(BaseModel):
    """Fixed unit pricing for a single tool."""

    units: int = Field(default=1, ge=1)
    external_cost: Decimal = Field(default=Decimal("0"), ge=0)
