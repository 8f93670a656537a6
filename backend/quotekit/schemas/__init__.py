"""Schema exports."""

from quotekit.schemas.client import ClientCreate, ClientRead, ClientSummary, ClientUpdate
from quotekit.schemas.pricing import (
    BreakdownLineRead,
    DesignPricingRequest,
    DiscountApplyRead,
    DiscountApplyRequest,
    DiscountInput,
    PricingResultRead,
    VideoPricingRequest,
    WebPricingRequest,
)
from quotekit.schemas.quote import QuoteCreate, QuoteRead, QuoteStatusUpdate, QuoteUpdate
from quotekit.schemas.rates import (
    ExchangeRatesRead,
    ExchangeRatesUpdate,
    RateCatalogRead,
    RateOverrides,
)
from quotekit.schemas.team import (
    Contribution,
    ProjectCompletionRequest,
    ShareAllocationRead,
    ShareCalculationRead,
    ShareRequest,
    SkillMatchRequest,
    SkillsSummaryRead,
    TeamMemberCreate,
    TeamMemberRead,
    TeamMemberUpdate,
    TimezoneReport,
)

__all__ = [
    "BreakdownLineRead",
    "ClientCreate",
    "ClientRead",
    "ClientSummary",
    "ClientUpdate",
    "Contribution",
    "DesignPricingRequest",
    "DiscountApplyRead",
    "DiscountApplyRequest",
    "DiscountInput",
    "ExchangeRatesRead",
    "ExchangeRatesUpdate",
    "PricingResultRead",
    "ProjectCompletionRequest",
    "QuoteCreate",
    "QuoteRead",
    "QuoteStatusUpdate",
    "QuoteUpdate",
    "RateCatalogRead",
    "RateOverrides",
    "ShareAllocationRead",
    "ShareCalculationRead",
    "ShareRequest",
    "SkillMatchRequest",
    "SkillsSummaryRead",
    "TeamMemberCreate",
    "TeamMemberRead",
    "TeamMemberUpdate",
    "TimezoneReport",
    "VideoPricingRequest",
    "WebPricingRequest",
]
