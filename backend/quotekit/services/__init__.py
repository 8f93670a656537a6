"""Service layer exports."""
from quotekit.services import (
    client_service,
    currency_service,
    discount_service,
    pricing_service,
    quote_service,
    rate_catalog_service,
    revenue_share_service,
    team_service,
)

__all__ = [
    "client_service",
    "currency_service",
    "discount_service",
    "pricing_service",
    "quote_service",
    "rate_catalog_service",
    "revenue_share_service",
    "team_service",
]
