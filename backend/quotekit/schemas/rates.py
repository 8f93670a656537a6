"""Rate catalog and exchange-rate schemas."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field


class RateCatalogRead(BaseModel):
    """Effective rate tables per service line."""

    web: dict[str, Any]
    design: dict[str, Any]
    video: dict[str, Any]
    client_multipliers: dict[str, Decimal]


class RateOverrides(BaseModel):
    """Partial rate edits; only the given keys change."""

    web: dict[str, Any] | None = None
    design: dict[str, Any] | None = None
    video: dict[str, Any] | None = None
    client_multipliers: dict[str, Decimal] | None = None


class ExchangeRatesRead(BaseModel):
    base_currency: str
    rates: dict[str, Decimal]


class ExchangeRatesUpdate(BaseModel):
    """Units of base currency per one unit of each listed currency."""

    rates: dict[str, Decimal] = Field(min_length=1)
