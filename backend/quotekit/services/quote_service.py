"""Quote persistence: price a request, apply discounts and store the result."""
from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quotekit.core.config import get_settings
from quotekit.models import Client, Quote, QuoteStatus, ServiceType
from quotekit.services import (
    client_service,
    currency_service,
    discount_service,
    pricing_service,
    rate_catalog_service,
)
from quotekit.services.discount_service import DiscountSpec
from quotekit.services.pricing_service import BreakdownLine, PriceQuote, QuoteRequest

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "Untitled Project"


@dataclass(slots=True)
class PricedRequest:
    """Engine output with any discount already folded in."""

    quote: PriceQuote
    breakdown: tuple[BreakdownLine, ...]
    original_total: Decimal
    total: Decimal
    discount: DiscountSpec | None = None


@dataclass(slots=True)
class QuoteSummary:
    """Display figures for a stored quote."""

    currency: str
    total: Decimal
    formatted_total: str
    take_home: Decimal
    formatted_take_home: str
    recurring_monthly: str | None


def price_request(
    catalog: rate_catalog_service.RateCatalog,
    request: QuoteRequest,
    discount: DiscountSpec | None = None,
) -> PricedRequest:
    """Run the engine and apply ``discount`` against one catalog snapshot."""
    quote = pricing_service.calculate_quote(catalog, request)
    if discount is None:
        return PricedRequest(
            quote=quote,
            breakdown=quote.breakdown,
            original_total=quote.total,
            total=quote.total,
        )
    result = discount_service.apply_discount(quote.total, discount)
    return PricedRequest(
        quote=quote,
        breakdown=discount_service.with_discount(quote.breakdown, result.line),
        original_total=result.original_total,
        total=result.total,
        discount=discount,
    )


def summarize_totals(
    total: Decimal,
    currency: str,
    rates: Mapping[str, Decimal],
    *,
    recurring_monthly: Decimal = Decimal("0"),
) -> QuoteSummary:
    """Format a base-currency total in ``currency`` along with the take-home.

    The take-home is what the client is actually billed (the rounded converted
    figure) brought back to the base currency.
    """
    base_currency = get_settings().base_currency
    code = currency.upper()
    converted = currency_service.round_money(
        currency_service.from_base(total, code, rates, base_currency=base_currency)
    )
    take_home = currency_service.take_home(
        converted, code, rates, base_currency=base_currency
    )
    recurring = None
    if recurring_monthly:
        recurring = (
            currency_service.format_currency(
                recurring_monthly, code, rates, base_currency=base_currency
            )
            + "/month"
        )
    return QuoteSummary(
        currency=code,
        total=converted,
        formatted_total=currency_service.format_amount(converted, code),
        take_home=take_home,
        formatted_take_home=currency_service.format_amount(take_home, base_currency),
        recurring_monthly=recurring,
    )


async def quote_summary(session: AsyncSession, quote: Quote) -> QuoteSummary:
    rates = await currency_service.load_rates(session)
    return summarize_totals(
        quote.total,
        quote.currency,
        rates,
        recurring_monthly=quote.recurring_monthly,
    )


def _base_quote_query() -> Any:
    return (
        select(Quote)
        .options(selectinload(Quote.client))
        .order_by(Quote.quoted_at.desc())
    )


async def list_quotes(
    session: AsyncSession,
    *,
    client_id: uuid.UUID | None = None,
    status: QuoteStatus | None = None,
    skip: int = 0,
    limit: int = 100,
) -> Sequence[Quote]:
    """Return quotes, newest first."""
    stmt = _base_quote_query()
    if client_id is not None:
        stmt = stmt.where(Quote.client_id == client_id)
    if status is not None:
        stmt = stmt.where(Quote.status == status)
    result = await session.execute(stmt.offset(skip).limit(limit))
    return result.scalars().unique().all()


async def get_quote(session: AsyncSession, quote_id: uuid.UUID) -> Quote | None:
    result = await session.execute(_base_quote_query().where(Quote.id == quote_id))
    return result.scalars().unique().one_or_none()


async def _validate_currency(session: AsyncSession, currency: str) -> str:
    rates = await currency_service.load_rates(session)
    code = currency.upper()
    currency_service.rate_for(code, rates, base_currency=get_settings().base_currency)
    return code


def _apply_pricing(quote: Quote, priced: PricedRequest) -> None:
    quote.service_type = ServiceType(priced.quote.service_type)
    quote.breakdown = [line.to_dict() for line in priced.breakdown]
    quote.subtotal = priced.quote.subtotal
    quote.original_total = priced.original_total
    quote.total = priced.total
    quote.recurring_monthly = priced.quote.recurring_monthly
    quote.discount = None if priced.discount is None else priced.discount.to_dict()


async def create_quote(
    session: AsyncSession,
    *,
    request: QuoteRequest,
    client_id: uuid.UUID | None = None,
    client_name: str | None = None,
    client_email: str = "",
    client_company: str = "",
    project_name: str | None = None,
    discount: DiscountSpec | None = None,
    currency: str | None = None,
    client_notes: str = "",
    internal_notes: str = "",
) -> Quote:
    """Price ``request`` against the current catalog and store it.

    A request that fails to price never creates a client.
    """
    if client_id is None and not (client_name and client_name.strip()):
        raise ValueError("Please enter client name")

    code = await _validate_currency(session, currency or get_settings().base_currency)
    catalog = await rate_catalog_service.load_catalog(session)
    priced = price_request(catalog, request, discount)

    if client_id is not None:
        client = await session.get(Client, client_id)
        if client is None:
            raise LookupError("Client not found")
    else:
        client = await client_service.find_or_create_client(
            session, name=client_name, email=client_email, company=client_company
        )

    quote = Quote(
        client_id=client.id,
        project_name=(project_name or "").strip() or DEFAULT_PROJECT_NAME,
        request=pricing_service.request_to_dict(request),
        currency=code,
        status=QuoteStatus.PENDING,
        client_notes=client_notes,
        internal_notes=internal_notes,
    )
    _apply_pricing(quote, priced)
    session.add(quote)
    await session.commit()
    await session.refresh(quote, attribute_names=["client"])
    logger.info(
        "Saved %s quote %s for client %s: total %s",
        priced.quote.service_type,
        quote.id,
        client.id,
        quote.total,
    )
    return quote


def stored_request(quote: Quote) -> QuoteRequest:
    return pricing_service.request_from_dict(quote.service_type.value, quote.request)


def stored_discount(quote: Quote) -> DiscountSpec | None:
    if not quote.discount:
        return None
    return DiscountSpec.from_dict(quote.discount)


async def update_quote(
    session: AsyncSession,
    *,
    quote: Quote,
    request: QuoteRequest | None = None,
    discount: DiscountSpec | None = None,
    remove_discount: bool = False,
    project_name: str | None = None,
    currency: str | None = None,
    status: QuoteStatus | None = None,
    client_notes: str | None = None,
    internal_notes: str | None = None,
) -> Quote:
    """Edit and re-save a quote, recomputing totals on the same row."""
    if request is None:
        request = stored_request(quote)
    if discount is None and not remove_discount:
        discount = stored_discount(quote)
    if remove_discount:
        discount = None

    catalog = await rate_catalog_service.load_catalog(session)
    priced = price_request(catalog, request, discount)

    if currency is not None:
        quote.currency = await _validate_currency(session, currency)
    if project_name is not None:
        quote.project_name = project_name.strip() or DEFAULT_PROJECT_NAME
    if status is not None:
        quote.status = status
    if client_notes is not None:
        quote.client_notes = client_notes
    if internal_notes is not None:
        quote.internal_notes = internal_notes

    quote.request = pricing_service.request_to_dict(request)
    _apply_pricing(quote, priced)
    await session.commit()
    await session.refresh(quote, attribute_names=["client"])
    logger.info("Recomputed quote %s: total %s", quote.id, quote.total)
    return quote


async def set_status(
    session: AsyncSession, *, quote: Quote, status: QuoteStatus
) -> Quote:
    quote.status = status
    await session.commit()
    await session.refresh(quote, attribute_names=["client"])
    logger.info("Quote %s marked %s", quote.id, status.value)
    return quote


async def delete_quote(session: AsyncSession, quote_id: uuid.UUID) -> bool:
    quote = await session.get(Quote, quote_id)
    if quote is None:
        return False
    await session.delete(quote)
    await session.commit()
    return True
