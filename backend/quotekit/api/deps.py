"""Common API dependencies."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from decimal import Decimal
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quotekit.db.session import get_session
from quotekit.services import currency_service, rate_catalog_service
from quotekit.services.rate_catalog_service import RateCatalog


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async for session in get_session():
        yield session


async def get_catalog(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> RateCatalog:
    """Fresh catalog snapshot for the duration of one request."""
    return await rate_catalog_service.load_catalog(session)


async def get_exchange_rates(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict[str, Decimal]:
    return await currency_service.load_rates(session)
