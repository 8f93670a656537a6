"""Rate catalog and exchange-rate endpoint tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

pytestmark = pytest.mark.asyncio


async def test_read_default_catalog(app_context) -> None:
    client = app_context["client"]

    response = await client.get("/api/v1/rates")

    assert response.status_code == 200
    payload = response.json()
    assert Decimal(payload["web"]["base_rates"]["business"]) == Decimal("6000")
    assert Decimal(payload["design"]["ai_discounts"]["heavy"]) == Decimal("0.3")
    assert Decimal(payload["client_multipliers"]["corporate"]) == Decimal("1.3")


async def test_patch_merges_and_delete_restores(app_context) -> None:
    client = app_context["client"]

    first = await client.patch(
        "/api/v1/rates", json={"web": {"feature_costs": {"chatbot": 4000}}}
    )
    second = await client.patch(
        "/api/v1/rates", json={"client_multipliers": {"nonprofit": "0.7"}}
    )
    assert first.status_code == 200
    assert second.status_code == 200

    payload = (await client.get("/api/v1/rates")).json()
    assert Decimal(payload["web"]["feature_costs"]["chatbot"]) == Decimal("4000")
    assert Decimal(payload["client_multipliers"]["nonprofit"]) == Decimal("0.7")

    reset = await client.delete("/api/v1/rates")
    assert reset.status_code == 200
    assert "chatbot" not in reset.json()["web"]["feature_costs"]
    assert "nonprofit" not in reset.json()["client_multipliers"]


async def test_patch_rejects_invalid_rates(app_context) -> None:
    client = app_context["client"]

    negative = await client.patch(
        "/api/v1/rates", json={"design": {"base_rates": {"logo": -5}}}
    )
    unknown = await client.patch("/api/v1/rates", json={"web": {"surcharges": {"x": 1}}})
    empty = await client.patch("/api/v1/rates", json={})

    assert negative.status_code == 400
    assert unknown.status_code == 400
    assert empty.status_code == 400


async def test_exchange_rates_round_trip(app_context) -> None:
    client = app_context["client"]

    initial = (await client.get("/api/v1/rates/exchange")).json()
    assert initial["base_currency"] == "INR"
    assert Decimal(initial["rates"]["USD"]) == Decimal("82")

    response = await client.put(
        "/api/v1/rates/exchange", json={"rates": {"usd": "83", "GBP": "104.5"}}
    )
    assert response.status_code == 200, response.text
    rates = response.json()["rates"]
    assert Decimal(rates["USD"]) == Decimal("83")
    assert Decimal(rates["GBP"]) == Decimal("104.5")

    priced = await client.post(
        "/api/v1/pricing/web", json={"site_type": "landing", "currency": "GBP"}
    )
    assert priced.json()["formatted_total"] == "GBP 29"


async def test_exchange_rates_reject_non_positive(app_context) -> None:
    client = app_context["client"]

    response = await client.put("/api/v1/rates/exchange", json={"rates": {"USD": 0}})

    assert response.status_code == 400
