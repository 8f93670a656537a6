"""Pricing schema definitions."""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class DiscountInput(BaseModel):
    """Custom discount applied after pricing."""

    kind: Literal["percentage", "fixed"]
    amount: Decimal


class PricingOptions(BaseModel):
    discount: DiscountInput | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)


class WebPricingRequest(PricingOptions):
    """Selections for a website quote."""

    site_type: str
    pages: int = Field(default=1, ge=1)
    features: list[str] = Field(default_factory=list)
    complexity: str = "standard"
    backend: str = "none"
    timeline: str = "standard"
    maintenance: str = "none"
    client_profile: str = "standard"


class DesignPricingRequest(PricingOptions):
    """Selections for a graphic design quote."""

    design_type: str
    features: list[str] = Field(default_factory=list)
    complexity: str = "standard"
    revisions: str = "standard"
    timeline: str = "standard"
    ai_assistance: str = "none"
    client_profile: str = "standard"


class VideoPricingRequest(PricingOptions):
    """Selections for a video production quote."""

    video_type: str
    duration: str = "short"
    features: list[str] = Field(default_factory=list)
    complexity: str = "standard"
    timeline: str = "standard"
    revisions: str = "standard"
    client_profile: str = "standard"


class BreakdownLineRead(BaseModel):
    """Single line of a quote breakdown."""

    label: str
    kind: str
    amount: Decimal
    percent: Decimal | None = None
    display: str | None = None

    model_config = ConfigDict(from_attributes=True)


class PricingResultRead(BaseModel):
    """Computed price with display figures in the requested currency."""

    service_type: str
    breakdown: list[BreakdownLineRead]
    subtotal: Decimal
    original_total: Decimal
    total: Decimal
    recurring_monthly: Decimal
    discount: DiscountInput | None = None
    currency: str
    formatted_total: str
    take_home: Decimal
    formatted_take_home: str
    formatted_recurring: str | None = None


class DiscountApplyRequest(BaseModel):
    """Apply a discount to an already computed total."""

    total: Decimal = Field(gt=0)
    breakdown: list[BreakdownLineRead] = Field(default_factory=list)
    discount: DiscountInput


class DiscountApplyRead(BaseModel):
    original_total: Decimal
    total: Decimal
    saved: Decimal
    breakdown: list[BreakdownLineRead]
