"""Pricing calculation endpoints; nothing here is persisted."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from quotekit.api import deps
from quotekit.core.config import get_settings
from quotekit.schemas.pricing import (
    BreakdownLineRead,
    DesignPricingRequest,
    DiscountApplyRead,
    DiscountApplyRequest,
    DiscountInput,
    PricingOptions,
    PricingResultRead,
    VideoPricingRequest,
    WebPricingRequest,
)
from quotekit.services import discount_service, pricing_service, quote_service
from quotekit.services.discount_service import DiscountSpec
from quotekit.services.pricing_service import BreakdownLine, LineKind
from quotekit.services.rate_catalog_service import RateCatalog

router = APIRouter(prefix="/pricing")


def _lines_read(
    lines: Iterable[BreakdownLine], currency: str, rates: Mapping[str, Decimal]
) -> list[BreakdownLineRead]:
    return [
        BreakdownLineRead(
            label=line.label,
            kind=line.kind.value,
            amount=line.amount,
            percent=line.percent,
            display=pricing_service.display_value(
                line, currency, rates, base_currency=get_settings().base_currency
            ),
        )
        for line in lines
    ]


def _discount_spec(discount: DiscountInput | None) -> DiscountSpec | None:
    if discount is None:
        return None
    return DiscountSpec.from_dict(discount.model_dump())


def _price(
    service_type: str,
    payload: PricingOptions,
    catalog: RateCatalog,
    rates: dict[str, Decimal],
) -> PricingResultRead:
    try:
        request = pricing_service.request_from_dict(
            service_type, payload.model_dump(exclude={"discount", "currency"})
        )
        priced = quote_service.price_request(
            catalog, request, _discount_spec(payload.discount)
        )
        summary = quote_service.summarize_totals(
            priced.total,
            payload.currency or get_settings().base_currency,
            rates,
            recurring_monthly=priced.quote.recurring_monthly,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return PricingResultRead(
        service_type=service_type,
        breakdown=_lines_read(priced.breakdown, summary.currency, rates),
        subtotal=priced.quote.subtotal,
        original_total=priced.original_total,
        total=priced.total,
        recurring_monthly=priced.quote.recurring_monthly,
        discount=payload.discount,
        currency=summary.currency,
        formatted_total=summary.formatted_total,
        take_home=summary.take_home,
        formatted_take_home=summary.formatted_take_home,
        formatted_recurring=summary.recurring_monthly,
    )


@router.post("/web", response_model=PricingResultRead, summary="Price a website")
async def price_web(
    payload: WebPricingRequest,
    catalog: Annotated[RateCatalog, Depends(deps.get_catalog)],
    rates: Annotated[dict[str, Decimal], Depends(deps.get_exchange_rates)],
) -> PricingResultRead:
    return _price("web", payload, catalog, rates)


@router.post("/design", response_model=PricingResultRead, summary="Price a design job")
async def price_design(
    payload: DesignPricingRequest,
    catalog: Annotated[RateCatalog, Depends(deps.get_catalog)],
    rates: Annotated[dict[str, Decimal], Depends(deps.get_exchange_rates)],
) -> PricingResultRead:
    return _price("design", payload, catalog, rates)


@router.post("/video", response_model=PricingResultRead, summary="Price a video")
async def price_video(
    payload: VideoPricingRequest,
    catalog: Annotated[RateCatalog, Depends(deps.get_catalog)],
    rates: Annotated[dict[str, Decimal], Depends(deps.get_exchange_rates)],
) -> PricingResultRead:
    return _price("video", payload, catalog, rates)


@router.post(
    "/discount", response_model=DiscountApplyRead, summary="Apply a custom discount"
)
async def apply_discount(
    payload: DiscountApplyRequest,
    rates: Annotated[dict[str, Decimal], Depends(deps.get_exchange_rates)],
) -> DiscountApplyRead:
    """Discount a computed total, replacing any discount line already shown."""
    try:
        lines = [
            BreakdownLine(
                label=line.label,
                kind=LineKind(line.kind),
                amount=line.amount,
                percent=line.percent,
            )
            for line in payload.breakdown
        ]
        result = discount_service.apply_discount(
            payload.total, _discount_spec(payload.discount)
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    breakdown = discount_service.with_discount(lines, result.line)
    return DiscountApplyRead(
        original_total=result.original_total,
        total=result.total,
        saved=result.saved,
        breakdown=_lines_read(breakdown, get_settings().base_currency, rates),
    )
