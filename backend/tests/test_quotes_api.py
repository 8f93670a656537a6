"""Saved quote API tests."""

from __future__ import annotations

import uuid
from decimal import Decimal

import pytest

pytestmark = pytest.mark.asyncio

WEB_REQUEST = {
    "site_type": "business",
    "pages": 5,
    "backend": "medium",
    "features": ["responsive"],
}


async def _save_web_quote(client, **extra) -> dict:
    payload = {"service_type": "web", "request": WEB_REQUEST, **extra}
    response = await client.post("/api/v1/quotes", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def test_save_quote_for_existing_client(app_context) -> None:
    client = app_context["client"]

    quote = await _save_web_quote(
        client,
        client_id=str(app_context["client_id"]),
        project_name="Studio site",
        currency="USD",
    )

    assert quote["client"]["name"] == "Acme Studios"
    assert quote["project_name"] == "Studio site"
    assert quote["status"] == "pending"
    assert Decimal(quote["total"]) == Decimal("14100")
    assert quote["formatted_total"] == "$172"
    assert Decimal(quote["take_home"]) == Decimal("14104")
    assert quote["request"]["features"] == ["responsive"]


async def test_save_quote_reuses_client_by_email(app_context) -> None:
    client = app_context["client"]

    quote = await _save_web_quote(
        client,
        client_name="ACME",
        client_email=app_context["client_email"],
    )

    assert quote["client_id"] == str(app_context["client_id"])
    assert quote["project_name"] == "Untitled Project"
    clients = (await client.get("/api/v1/clients")).json()
    assert len(clients) == 1


async def test_save_quote_creates_client_by_name(app_context) -> None:
    client = app_context["client"]

    quote = await _save_web_quote(client, client_name="Harbor Books")

    assert quote["client"]["name"] == "Harbor Books"
    assert quote["client_id"] != str(app_context["client_id"])


async def test_save_quote_errors(app_context) -> None:
    client = app_context["client"]

    no_client = await client.post(
        "/api/v1/quotes", json={"service_type": "web", "request": WEB_REQUEST}
    )
    unknown_client = await client.post(
        "/api/v1/quotes",
        json={"service_type": "web", "request": WEB_REQUEST, "client_id": str(uuid.uuid4())},
    )
    bad_variant = await client.post(
        "/api/v1/quotes",
        json={
            "service_type": "video",
            "request": {"video_type": "hologram"},
            "client_name": "Harbor Books",
        },
    )

    assert no_client.status_code == 400
    assert no_client.json()["detail"] == "Please enter client name"
    assert unknown_client.status_code == 404
    assert bad_variant.status_code == 400


async def test_edit_quote_recomputes_totals(app_context) -> None:
    client = app_context["client"]
    quote = await _save_web_quote(
        client,
        client_id=str(app_context["client_id"]),
        discount={"kind": "percentage", "amount": 10},
    )
    assert Decimal(quote["total"]) == Decimal("12690")

    response = await client.patch(
        f"/api/v1/quotes/{quote['id']}",
        json={"request": {**WEB_REQUEST, "timeline": "rush"}, "project_name": "Rush job"},
    )

    assert response.status_code == 200, response.text
    updated = response.json()
    assert updated["id"] == quote["id"]
    assert updated["project_name"] == "Rush job"
    assert Decimal(updated["original_total"]) == Decimal("16920")
    assert Decimal(updated["total"]) == Decimal("15228")
    assert updated["breakdown"][-1]["label"] == "Custom Discount (10%)"

    cleared = await client.patch(
        f"/api/v1/quotes/{quote['id']}", json={"remove_discount": True}
    )
    assert Decimal(cleared.json()["total"]) == Decimal("16920")


async def test_status_filter_and_delete(app_context) -> None:
    client = app_context["client"]
    first = await _save_web_quote(client, client_id=str(app_context["client_id"]))
    second = await _save_web_quote(client, client_name="Harbor Books")

    accepted = await client.post(
        f"/api/v1/quotes/{first['id']}/status", json={"status": "accepted"}
    )
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "accepted"

    filtered = (await client.get("/api/v1/quotes", params={"status": "accepted"})).json()
    assert [item["id"] for item in filtered] == [first["id"]]
    by_client = (
        await client.get("/api/v1/quotes", params={"client_id": second["client_id"]})
    ).json()
    assert [item["id"] for item in by_client] == [second["id"]]

    deleted = await client.delete(f"/api/v1/quotes/{first['id']}")
    assert deleted.status_code == 204
    assert (await client.get(f"/api/v1/quotes/{first['id']}")).status_code == 404
    assert (await client.delete(f"/api/v1/quotes/{first['id']}")).status_code == 404


@pytest.mark.parametrize(
    "request_data",
    [
        {"site_type": "business", "pages": None},
        {"site_type": ["business"]},
        {"site_type": "business", "features": 7},
    ],
)
async def test_malformed_request_returns_400(app_context, request_data: dict) -> None:
    client = app_context["client"]

    created = await client.post(
        "/api/v1/quotes",
        json={
            "service_type": "web",
            "request": request_data,
            "client_id": str(app_context["client_id"]),
        },
    )

    assert created.status_code == 400, created.text


async def test_malformed_edit_returns_400(app_context) -> None:
    client = app_context["client"]
    quote = await _save_web_quote(client, client_id=str(app_context["client_id"]))

    response = await client.patch(
        f"/api/v1/quotes/{quote['id']}",
        json={"request": {**WEB_REQUEST, "pages": None}},
    )

    assert response.status_code == 400
    unchanged = (await client.get(f"/api/v1/quotes/{quote['id']}")).json()
    assert unchanged["request"]["pages"] == 5
