"""Client management API tests."""

from __future__ import annotations

import uuid

import pytest

pytestmark = pytest.mark.asyncio


async def test_list_and_search_clients(app_context) -> None:
    client = app_context["client"]
    created = await client.post(
        "/api/v1/clients",
        json={"name": "Bluebird Cafe", "email": "owner@bluebird.example.com"},
    )
    assert created.status_code == 201, created.text

    everyone = (await client.get("/api/v1/clients")).json()
    assert [item["name"] for item in everyone] == ["Acme Studios", "Bluebird Cafe"]

    found = (await client.get("/api/v1/clients", params={"search": "bluebird"})).json()
    assert [item["name"] for item in found] == ["Bluebird Cafe"]


async def test_get_and_update_client(app_context) -> None:
    client = app_context["client"]
    client_id = app_context["client_id"]

    response = await client.patch(
        f"/api/v1/clients/{client_id}",
        json={"company": "Acme Holdings", "notes": "Prefers invoices in USD"},
    )
    assert response.status_code == 200, response.text

    fetched = (await client.get(f"/api/v1/clients/{client_id}")).json()
    assert fetched["name"] == app_context["client_name"]
    assert fetched["email"] == app_context["client_email"]
    assert fetched["company"] == "Acme Holdings"
    assert fetched["notes"] == "Prefers invoices in USD"


async def test_create_client_validates_payload(app_context) -> None:
    client = app_context["client"]

    blank = await client.post("/api/v1/clients", json={"name": "   "})
    bad_email = await client.post(
        "/api/v1/clients", json={"name": "Zed", "email": "not-an-email"}
    )

    assert blank.status_code == 400
    assert bad_email.status_code == 422


async def test_missing_client_returns_404(app_context) -> None:
    client = app_context["client"]
    missing = uuid.uuid4()

    assert (await client.get(f"/api/v1/clients/{missing}")).status_code == 404
    assert (await client.get(f"/api/v1/clients/{missing}/quotes")).status_code == 404
    assert (await client.delete(f"/api/v1/clients/{missing}")).status_code == 404


async def test_delete_client_removes_its_quotes(app_context) -> None:
    client = app_context["client"]
    client_id = app_context["client_id"]
    saved = await client.post(
        "/api/v1/quotes",
        json={
            "client_id": str(client_id),
            "service_type": "design",
            "request": {"design_type": "logo"},
        },
    )
    assert saved.status_code == 201, saved.text

    listed = (await client.get(f"/api/v1/clients/{client_id}/quotes")).json()
    assert [item["id"] for item in listed] == [saved.json()["id"]]

    deleted = await client.delete(f"/api/v1/clients/{client_id}")
    assert deleted.status_code == 204
    gone = await client.get(f"/api/v1/quotes/{saved.json()['id']}")
    assert gone.status_code == 404
