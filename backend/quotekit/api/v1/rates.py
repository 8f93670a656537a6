"""Rate catalog and exchange-rate endpoints."""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from quotekit.api import deps
from quotekit.core.config import get_settings
from quotekit.schemas.rates import (
    ExchangeRatesRead,
    ExchangeRatesUpdate,
    RateCatalogRead,
    RateOverrides,
)
from quotekit.services import currency_service, rate_catalog_service
from quotekit.services.rate_catalog_service import RateCatalog

router = APIRouter()


@router.get("", response_model=RateCatalogRead, summary="Current rate catalog")
async def read_rates(
    catalog: Annotated[RateCatalog, Depends(deps.get_catalog)],
) -> RateCatalogRead:
    return RateCatalogRead.model_validate(catalog.to_dict())


@router.patch("", response_model=RateCatalogRead, summary="Override rates")
async def update_rates(
    payload: RateOverrides,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> RateCatalogRead:
    """Merge the given keys over the current catalog; other keys are untouched."""
    overrides = payload.model_dump(exclude_none=True)
    if not overrides:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="No rate changes supplied"
        )
    try:
        catalog = await rate_catalog_service.save_overrides(session, overrides)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return RateCatalogRead.model_validate(catalog.to_dict())


@router.delete("", response_model=RateCatalogRead, summary="Restore default rates")
async def reset_rates(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> RateCatalogRead:
    catalog = await rate_catalog_service.reset_overrides(session)
    return RateCatalogRead.model_validate(catalog.to_dict())


@router.get(
    "/exchange", response_model=ExchangeRatesRead, summary="Current exchange rates"
)
async def read_exchange_rates(
    rates: Annotated[dict[str, Decimal], Depends(deps.get_exchange_rates)],
) -> ExchangeRatesRead:
    return ExchangeRatesRead(base_currency=get_settings().base_currency, rates=rates)


@router.put(
    "/exchange", response_model=ExchangeRatesRead, summary="Set exchange rates"
)
async def update_exchange_rates(
    payload: ExchangeRatesUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ExchangeRatesRead:
    try:
        rates = await currency_service.save_rates(session, payload.rates)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return ExchangeRatesRead(base_currency=get_settings().base_currency, rates=rates)
