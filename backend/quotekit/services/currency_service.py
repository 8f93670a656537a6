"""Currency conversion between the base currency and display currencies.

Rate tables map a currency code to the number of base-currency units one unit
of that currency is worth (``{"USD": 82}`` means 1 USD = 82 INR). The base
currency itself is implicitly 1. Conversions never round; callers round once
with :func:`round_money` after all arithmetic is done.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from quotekit.core.config import get_settings
from quotekit.services import document_service
from quotekit.services.errors import InvalidRate, UnknownCurrency

logger = logging.getLogger(__name__)

BASE_CURRENCY = "INR"
WHOLE_UNIT = Decimal("1")
EXCHANGE_RATES_KEY = "exchange_rates"

# Used whenever no operator-supplied rate exists for a currency.
FALLBACK_RATES: dict[str, Decimal] = {
    "INR": Decimal("1"),
    "USD": Decimal("82"),
    "CAD": Decimal("60"),
}

CURRENCY_SYMBOLS: dict[str, str] = {
    "INR": "₹",
    "USD": "$",
    "CAD": "C$",
}


def round_money(value: Decimal | int | float | str) -> Decimal:
    """Round to the nearest whole currency unit, halves away from zero."""
    return Decimal(str(value)).quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)


def rate_for(
    currency: str,
    rates: Mapping[str, Decimal],
    *,
    base_currency: str = BASE_CURRENCY,
) -> Decimal:
    code = currency.upper()
    if code == base_currency:
        return Decimal("1")
    rate = rates.get(code)
    if rate is None:
        raise UnknownCurrency(code)
    return Decimal(rate)


def to_base(
    amount: Decimal,
    currency: str,
    rates: Mapping[str, Decimal],
    *,
    base_currency: str = BASE_CURRENCY,
) -> Decimal:
    """Convert ``amount`` expressed in ``currency`` into the base currency."""
    return Decimal(amount) * rate_for(currency, rates, base_currency=base_currency)


def from_base(
    amount: Decimal,
    currency: str,
    rates: Mapping[str, Decimal],
    *,
    base_currency: str = BASE_CURRENCY,
) -> Decimal:
    """Convert a base-currency ``amount`` into ``currency``."""
    return Decimal(amount) / rate_for(currency, rates, base_currency=base_currency)


def take_home(
    amount: Decimal,
    currency: str,
    rates: Mapping[str, Decimal],
    *,
    base_currency: str = BASE_CURRENCY,
) -> Decimal:
    """Rounded base-currency value of an amount billed in ``currency``."""
    return round_money(to_base(amount, currency, rates, base_currency=base_currency))


def format_amount(amount: Decimal, currency: str) -> str:
    """Render an already-converted amount with its symbol and digit grouping."""
    code = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    value = round_money(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,}"


def format_currency(
    amount: Decimal,
    currency: str,
    rates: Mapping[str, Decimal],
    *,
    base_currency: str = BASE_CURRENCY,
) -> str:
    """Convert a base amount to ``currency`` and render it for display."""
    converted = from_base(amount, currency, rates, base_currency=base_currency)
    return format_amount(converted, currency)


def normalize_rates(raw: Mapping[str, Any]) -> dict[str, Decimal]:
    """Validate a rate table, upper-casing codes and coercing to Decimal."""
    normalized: dict[str, Decimal] = {}
    for code, value in raw.items():
        key = str(code).strip().upper()
        if len(key) != 3 or not key.isalpha():
            raise InvalidRate(f"Invalid currency code '{code}'")
        try:
            rate = Decimal(str(value))
        except (InvalidOperation, ValueError) as exc:
            raise InvalidRate(f"Exchange rate for {key} is not a number") from exc
        if not rate.is_finite() or rate <= 0:
            raise InvalidRate(f"Exchange rate for {key} must be positive")
        normalized[key] = rate
    return normalized


def _serialize(rates: Mapping[str, Decimal]) -> dict[str, str]:
    return {code: str(rate) for code, rate in rates.items()}


async def load_rates(session: AsyncSession) -> dict[str, Decimal]:
    """Fallback table, overridden by configured and then by stored rates."""
    settings = get_settings()
    rates = dict(FALLBACK_RATES)
    rates.update(normalize_rates(settings.exchange_rates))
    stored = await document_service.get_document(session, EXCHANGE_RATES_KEY)
    if stored:
        rates.update(normalize_rates(stored))
    rates[settings.base_currency] = Decimal("1")
    return rates


async def save_rates(
    session: AsyncSession, rates: Mapping[str, Any]
) -> dict[str, Decimal]:
    """Persist operator rate overrides and return the effective table."""
    settings = get_settings()
    updates = normalize_rates(rates)
    if settings.base_currency in updates and updates[settings.base_currency] != 1:
        raise InvalidRate(f"Base currency {settings.base_currency} is fixed at 1")
    stored = normalize_rates(
        await document_service.get_document(session, EXCHANGE_RATES_KEY) or {}
    )
    stored.update(updates)
    await document_service.put_document(session, EXCHANGE_RATES_KEY, _serialize(stored))
    logger.info("Exchange rates updated for %s", ", ".join(sorted(updates)))
    return await load_rates(session)


async def reset_rates(session: AsyncSession) -> dict[str, Decimal]:
    """Drop stored overrides so configured and fallback rates apply again."""
    await document_service.delete_document(session, EXCHANGE_RATES_KEY)
    return await load_rates(session)
