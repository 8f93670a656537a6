"""Saved quote API."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from quotekit.api import deps
from quotekit.models import Quote, QuoteStatus
from quotekit.schemas.quote import QuoteCreate, QuoteRead, QuoteStatusUpdate, QuoteUpdate
from quotekit.services import pricing_service, quote_service
from quotekit.services.discount_service import DiscountSpec

router = APIRouter()


async def _read(session: AsyncSession, quote: Quote) -> QuoteRead:
    summary = await quote_service.quote_summary(session, quote)
    return QuoteRead.model_validate(quote).model_copy(
        update={
            "formatted_total": summary.formatted_total,
            "take_home": summary.take_home,
            "formatted_take_home": summary.formatted_take_home,
        }
    )


async def _require_quote(session: AsyncSession, quote_id: uuid.UUID) -> Quote:
    quote = await quote_service.get_quote(session, quote_id)
    if quote is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Quote not found"
        )
    return quote


@router.get("", response_model=list[QuoteRead], summary="List quotes")
async def list_quotes(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    client_id: uuid.UUID | None = None,
    status_filter: Annotated[QuoteStatus | None, Query(alias="status")] = None,
    skip: int = 0,
    limit: int = 100,
) -> list[QuoteRead]:
    quotes = await quote_service.list_quotes(
        session,
        client_id=client_id,
        status=status_filter,
        skip=skip,
        limit=min(limit, 500),
    )
    return [QuoteRead.model_validate(quote) for quote in quotes]


@router.post(
    "",
    response_model=QuoteRead,
    status_code=status.HTTP_201_CREATED,
    summary="Price and save a quote",
)
async def create_quote(
    payload: QuoteCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> QuoteRead:
    try:
        request = pricing_service.request_from_dict(
            payload.service_type.value, payload.request
        )
        quote = await quote_service.create_quote(
            session,
            request=request,
            client_id=payload.client_id,
            client_name=payload.client_name,
            client_email=payload.client_email or "",
            client_company=payload.client_company,
            project_name=payload.project_name,
            discount=(
                DiscountSpec.from_dict(payload.discount.model_dump())
                if payload.discount
                else None
            ),
            currency=payload.currency,
            client_notes=payload.client_notes,
            internal_notes=payload.internal_notes,
        )
    except LookupError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return await _read(session, quote)


@router.get("/{quote_id}", response_model=QuoteRead, summary="Get quote")
async def get_quote(
    quote_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> QuoteRead:
    return await _read(session, await _require_quote(session, quote_id))


@router.patch("/{quote_id}", response_model=QuoteRead, summary="Edit and re-price")
async def update_quote(
    quote_id: uuid.UUID,
    payload: QuoteUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> QuoteRead:
    quote = await _require_quote(session, quote_id)
    try:
        request = None
        if payload.request is not None:
            request = pricing_service.request_from_dict(
                quote.service_type.value, payload.request
            )
        quote = await quote_service.update_quote(
            session,
            quote=quote,
            request=request,
            discount=(
                DiscountSpec.from_dict(payload.discount.model_dump())
                if payload.discount
                else None
            ),
            remove_discount=payload.remove_discount,
            project_name=payload.project_name,
            currency=payload.currency,
            status=payload.status,
            client_notes=payload.client_notes,
            internal_notes=payload.internal_notes,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return await _read(session, quote)


@router.post(
    "/{quote_id}/status", response_model=QuoteRead, summary="Change quote status"
)
async def set_quote_status(
    quote_id: uuid.UUID,
    payload: QuoteStatusUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> QuoteRead:
    quote = await _require_quote(session, quote_id)
    quote = await quote_service.set_status(session, quote=quote, status=payload.status)
    return await _read(session, quote)


@router.delete(
    "/{quote_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete quote",
)
async def delete_quote(
    quote_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> Response:
    if not await quote_service.delete_quote(session, quote_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Quote not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
