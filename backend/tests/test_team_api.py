"""Team roster and revenue-sharing API tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

pytestmark = pytest.mark.asyncio

MEMBERS = [
    {
        "name": "Asha",
        "hourly_rate": "1500",
        "share_percentage": "40",
        "country": "India",
        "timezone": "GMT+5:30",
        "role": "Developer",
        "skills": {"webDevelopment": "expert", "design": "intermediate"},
    },
    {
        "name": "Ben",
        "hourly_rate": "40",
        "share_percentage": "30",
        "country": "Canada",
        "timezone": "GMT-5",
        "role": "Designer",
        "skills": {"design": "advanced"},
    },
]


async def _add_members(client) -> list[dict]:
    created = []
    for member in MEMBERS:
        response = await client.post("/api/v1/team/members", json=member)
        assert response.status_code == 201, response.text
        created.append(response.json())
    return created


async def test_shares_split_with_company_remainder(app_context) -> None:
    client = app_context["client"]
    await _add_members(client)

    response = await client.post("/api/v1/team/shares", json={"project_total": "100000"})

    assert response.status_code == 200, response.text
    payload = response.json()
    assert [item["name"] for item in payload["allocations"]] == ["Asha", "Ben", "Company"]
    assert [Decimal(item["amount"]) for item in payload["allocations"]] == [
        Decimal("40000"),
        Decimal("30000"),
        Decimal("30000"),
    ]
    assert payload["allocations"][-1]["participant_id"] == "company"
    assert Decimal(payload["drift"]) == 0


async def test_shares_rejected_without_active_members(app_context) -> None:
    client = app_context["client"]

    response = await client.post("/api/v1/team/shares", json={"project_total": "1000"})

    assert response.status_code == 400


async def test_member_validation_errors(app_context) -> None:
    client = app_context["client"]

    bad_share = await client.post(
        "/api/v1/team/members",
        json={"name": "Zed", "hourly_rate": "10", "share_percentage": "150"},
    )
    bad_rate = await client.post(
        "/api/v1/team/members",
        json={"name": "Zed", "hourly_rate": "0", "share_percentage": "10"},
    )

    assert bad_share.status_code == 400
    assert bad_rate.status_code == 400


async def test_update_toggle_and_delete_member(app_context) -> None:
    client = app_context["client"]
    asha, ben = await _add_members(client)

    updated = await client.patch(
        f"/api/v1/team/members/{ben['id']}", json={"share_percentage": "20"}
    )
    assert updated.status_code == 200
    assert Decimal(updated.json()["share_percentage"]) == Decimal("20")

    toggled = await client.post(f"/api/v1/team/members/{asha['id']}/toggle")
    assert toggled.json()["active"] is False

    shares = (
        await client.post("/api/v1/team/shares", json={"project_total": "1000"})
    ).json()
    assert [item["name"] for item in shares["allocations"]] == ["Ben", "Company"]
    assert Decimal(shares["allocations"][-1]["percentage"]) == Decimal("80")

    deleted = await client.delete(f"/api/v1/team/members/{ben['id']}")
    assert deleted.status_code == 204
    remaining = (await client.get("/api/v1/team/members")).json()
    assert [member["name"] for member in remaining] == ["Asha"]


async def test_project_completion_credits_members(app_context) -> None:
    client = app_context["client"]
    asha, _ = await _add_members(client)

    response = await client.post(
        "/api/v1/team/projects/acme-site/complete",
        json={"contributions": [{"member_id": asha["id"], "amount": "40000"}]},
    )

    assert response.status_code == 200, response.text
    (member,) = response.json()
    assert member["projects_completed"] == 1
    assert Decimal(member["total_earnings"]) == Decimal("40000")
    assert member["project_history"][0]["project_id"] == "acme-site"


async def test_skills_summary_and_matching(app_context) -> None:
    client = app_context["client"]
    await _add_members(client)

    summary = (await client.get("/api/v1/team/skills")).json()
    assert summary["categories"]["webDevelopment"] == "Web Development"
    assert summary["summary"]["design"]["advanced"] == 1
    assert summary["summary"]["design"]["intermediate"] == 1

    matches = await client.post(
        "/api/v1/team/skills/match", json={"skills": {"design": "advanced"}}
    )
    assert [member["name"] for member in matches.json()] == ["Ben"]

    invalid = await client.post(
        "/api/v1/team/skills/match", json={"skills": {"design": "guru"}}
    )
    assert invalid.status_code == 400


async def test_timezone_report(app_context) -> None:
    client = app_context["client"]
    await _add_members(client)

    report = (
        await client.get("/api/v1/team/timezones", params={"target": "UTC+4"})
    ).json()
    assert report["distribution"] == {"GMT+5:30": 1, "GMT-5": 1}
    assert report["target_hours"] == 4
    assert [member["name"] for member in report["members"]] == ["Asha"]

    bad = await client.get("/api/v1/team/timezones", params={"target": "Mars"})
    assert bad.status_code == 400


async def test_update_member_rejects_null_fields(app_context) -> None:
    client = app_context["client"]
    asha, _ = await _add_members(client)
    url = f"/api/v1/team/members/{asha['id']}"

    for field in ("name", "share_percentage", "hourly_rate", "active", "timezone"):
        response = await client.patch(url, json={field: None})
        assert response.status_code == 400, (field, response.text)

    (stored,) = [
        member
        for member in (await client.get("/api/v1/team/members")).json()
        if member["id"] == asha["id"]
    ]
    assert stored["name"] == "Asha"
    assert Decimal(stored["share_percentage"]) == Decimal("40")
    assert stored["active"] is True
    assert stored["timezone"] == "GMT+5:30"


async def test_update_member_null_email_clears_it(app_context) -> None:
    client = app_context["client"]
    created = await client.post(
        "/api/v1/team/members",
        json={**MEMBERS[0], "email": "asha@example.com"},
    )
    member_id = created.json()["id"]

    response = await client.patch(f"/api/v1/team/members/{member_id}", json={"email": None})

    assert response.status_code == 200, response.text
    assert response.json()["email"] == ""
