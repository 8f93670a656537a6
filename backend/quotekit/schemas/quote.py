"""Pydantic schemas for saved quotes."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from quotekit.models.quote import QuoteStatus, ServiceType
from quotekit.schemas.client import ClientSummary
from quotekit.schemas.pricing import BreakdownLineRead, DiscountInput


class QuoteCreate(BaseModel):
    """Save a quote for an existing client or one found by name/e-mail."""

    client_id: uuid.UUID | None = None
    client_name: str | None = None
    client_email: EmailStr | None = None
    client_company: str = ""
    project_name: str | None = None
    service_type: ServiceType
    request: dict[str, Any]
    discount: DiscountInput | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    client_notes: str = ""
    internal_notes: str = ""


class QuoteUpdate(BaseModel):
    """Edit-and-resave payload; totals are always recomputed."""

    request: dict[str, Any] | None = None
    discount: DiscountInput | None = None
    remove_discount: bool = False
    project_name: str | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    status: QuoteStatus | None = None
    client_notes: str | None = None
    internal_notes: str | None = None


class QuoteStatusUpdate(BaseModel):
    status: QuoteStatus


class QuoteRead(BaseModel):
    """Serialized quote with display totals."""

    id: uuid.UUID
    client_id: uuid.UUID
    client: ClientSummary
    project_name: str
    quoted_at: datetime
    service_type: ServiceType
    request: dict[str, Any]
    breakdown: list[BreakdownLineRead]
    subtotal: Decimal
    original_total: Decimal
    total: Decimal
    recurring_monthly: Decimal
    discount: DiscountInput | None = None
    currency: str
    status: QuoteStatus
    client_notes: str
    internal_notes: str
    formatted_total: str | None = None
    take_home: Decimal | None = None
    formatted_take_home: str | None = None

    model_config = ConfigDict(from_attributes=True)
