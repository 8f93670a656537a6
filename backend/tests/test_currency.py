"""Tests for currency conversion helpers."""

from __future__ import annotations

from decimal import Decimal

import pytest

from quotekit.services.currency_service import (
    FALLBACK_RATES,
    format_amount,
    format_currency,
    from_base,
    normalize_rates,
    round_money,
    take_home,
    to_base,
)
from quotekit.services.errors import InvalidRate, UnknownCurrency


def test_conversions_use_base_units_per_currency() -> None:
    assert to_base(Decimal("100"), "USD", FALLBACK_RATES) == Decimal("8200")
    assert from_base(Decimal("8200"), "usd", FALLBACK_RATES) == Decimal("100")
    assert to_base(Decimal("75"), "INR", FALLBACK_RATES) == Decimal("75")


def test_conversion_does_not_round() -> None:
    assert from_base(Decimal("100"), "CAD", FALLBACK_RATES) == Decimal("100") / Decimal("60")


def test_unknown_currency() -> None:
    with pytest.raises(UnknownCurrency) as excinfo:
        to_base(Decimal("1"), "eur", FALLBACK_RATES)

    assert excinfo.value.currency == "EUR"


def test_round_money_is_half_up() -> None:
    assert round_money(Decimal("2.5")) == Decimal("3")
    assert round_money(Decimal("-2.5")) == Decimal("-3")
    assert round_money("6142.49") == Decimal("6142")


def test_format_currency_converts_then_rounds() -> None:
    assert format_currency(Decimal("14100"), "INR", FALLBACK_RATES) == "₹14,100"
    # 14100 / 82 = 171.95...
    assert format_currency(Decimal("14100"), "USD", FALLBACK_RATES) == "$172"
    assert format_currency(Decimal("1200000"), "CAD", FALLBACK_RATES) == "C$20,000"
    assert format_amount(Decimal("-450"), "EUR") == "-EUR 450"


def test_take_home_rounds_base_amount() -> None:
    assert take_home(Decimal("172"), "USD", FALLBACK_RATES) == Decimal("14104")
    assert take_home(Decimal("10.5"), "INR", FALLBACK_RATES) == Decimal("11")


def test_normalize_rates() -> None:
    assert normalize_rates({"usd": "83.5", " eur ": 90}) == {
        "USD": Decimal("83.5"),
        "EUR": Decimal("90"),
    }
    for bad in ({"US": 1}, {"USD": 0}, {"USD": "n/a"}, {"USD": "Infinity"}):
        with pytest.raises(InvalidRate):
            normalize_rates(bad)
