"""Tests for the quote request workflow endpoints."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

API = "/api/v1/quotes"

SEND_PAYLOAD = {
    "items": [
        {"description": "Bridal bouquet", "quantity": 1, "unit_price": "150.00"},
        {"description": "Table centrepiece", "quantity": 10, "unit_price": "35.00"},
    ],
    "comment": "Prices include delivery",
}


@pytest.fixture
async def requested_quote(client: AsyncClient, client_user, auth_headers):
    response = await client.post(
        API,
        json={
            "title": "Wedding flowers",
            "event_type": "wedding",
            "event_date": "2027-06-12",
            "description": "White roses and peonies for 80 guests",
            "budget": "600.00",
            "phone": "0601020304",
        },
        headers=auth_headers(client_user),
    )
    assert response.status_code == 201
    return response.json()


async def test_request_copies_customer_details(requested_quote):
    assert requested_quote["status"] == "pending"
    assert requested_quote["customer_name"] == "Claire Martin"
    assert requested_quote["customer_email"] == "client@example.com"
    assert requested_quote["customer_phone"] == "0601020304"
    assert requested_quote["history"][0]["comment"] == "Quote request created"


async def test_request_requires_description(client: AsyncClient, client_user, auth_headers):
    response = await client.post(API, json={"title": "Empty"}, headers=auth_headers(client_user))
    assert response.status_code == 422


async def test_my_quotes_are_private(client: AsyncClient, requested_quote, client_user, make_user, auth_headers):
    mine = await client.get(f"{API}/mine", headers=auth_headers(client_user))
    assert [q["id"] for q in mine.json()] == [requested_quote["id"]]

    other = auth_headers(await make_user("other@example.com"))
    assert (await client.get(f"{API}/mine/{requested_quote['id']}", headers=other)).status_code == 404


async def test_send_and_accept(client: AsyncClient, requested_quote, client_user, admin_user, auth_headers):
    admin = auth_headers(admin_user)
    sent = await client.post(f"{API}/{requested_quote['id']}/send", json=SEND_PAYLOAD, headers=admin)

    assert sent.status_code == 200
    body = sent.json()
    assert body["status"] == "sent"
    assert Decimal(body["subtotal"]) == Decimal("500.00")
    assert Decimal(body["tax"]) == Decimal("100.00")
    assert Decimal(body["total"]) == Decimal("600.00")
    assert [i["description"] for i in body["items"]] == ["Bridal bouquet", "Table centrepiece"]
    assert body["valid_until"] is not None

    accepted = await client.post(
        f"{API}/mine/{requested_quote['id']}/accept", json={"comment": "Perfect"}, headers=auth_headers(client_user)
    )
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "accepted"
    assert [h["status"] for h in accepted.json()["history"]] == ["pending", "sent", "accepted"]

    resend = await client.post(f"{API}/{requested_quote['id']}/send", json=SEND_PAYLOAD, headers=admin)
    assert resend.status_code == 400


async def test_custom_tax_rate(client: AsyncClient, requested_quote, admin_user, auth_headers):
    response = await client.post(
        f"{API}/{requested_quote['id']}/send",
        json={**SEND_PAYLOAD, "tax_rate": "0.10"},
        headers=auth_headers(admin_user),
    )
    assert Decimal(response.json()["total"]) == Decimal("550.00")


async def test_valid_until_in_the_past_is_rejected(client: AsyncClient, requested_quote, admin_user, auth_headers):
    past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    response = await client.post(
        f"{API}/{requested_quote['id']}/send",
        json={**SEND_PAYLOAD, "valid_until": past},
        headers=auth_headers(admin_user),
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "valid_until must be in the future"


async def test_pending_quote_cannot_be_accepted(client: AsyncClient, requested_quote, client_user, auth_headers):
    response = await client.post(f"{API}/mine/{requested_quote['id']}/accept", headers=auth_headers(client_user))
    assert response.status_code == 400
    assert response.json()["detail"] == "Only sent quotes can be accepted (current status: pending)"


async def test_decline_and_cancel(client: AsyncClient, requested_quote, client_user, admin_user, auth_headers):
    customer = auth_headers(client_user)
    await client.post(f"{API}/{requested_quote['id']}/send", json=SEND_PAYLOAD, headers=auth_headers(admin_user))

    declined = await client.post(f"{API}/mine/{requested_quote['id']}/decline", headers=customer)
    assert declined.json()["status"] == "declined"
    assert declined.json()["history"][-1]["comment"] == "Quote declined by customer"

    cancel = await client.post(f"{API}/mine/{requested_quote['id']}/cancel", headers=customer)
    assert cancel.status_code == 400


async def test_customer_cancels_pending_quote(client: AsyncClient, requested_quote, client_user, auth_headers):
    response = await client.post(f"{API}/mine/{requested_quote['id']}/cancel", headers=auth_headers(client_user))
    assert response.json()["status"] == "cancelled"


async def test_admin_edit_status_and_delete(client: AsyncClient, requested_quote, admin_user, auth_headers):
    admin = auth_headers(admin_user)
    quote_id = requested_quote["id"]

    edited = await client.patch(f"{API}/{quote_id}", json={"admin_notes": "Call back Monday"}, headers=admin)
    assert edited.json()["admin_notes"] == "Call back Monday"
    assert edited.json()["title"] == "Wedding flowers"

    processing = await client.put(f"{API}/{quote_id}/status", json={"status": "processing"}, headers=admin)
    assert processing.json()["status"] == "processing"

    assert [q["id"] for q in (await client.get(API, params={"status": "processing"}, headers=admin)).json()] == [
        quote_id
    ]
    assert (await client.get(API, params={"status": "sent"}, headers=admin)).json() == []

    assert (await client.delete(f"{API}/{quote_id}", headers=admin)).status_code == 204
    assert (await client.get(f"{API}/{quote_id}", headers=admin)).status_code == 404


async def test_admin_routes_need_admin(client: AsyncClient, requested_quote, client_user, auth_headers):
    response = await client.post(
        f"{API}/{requested_quote['id']}/send", json=SEND_PAYLOAD, headers=auth_headers(client_user)
    )
    assert response.status_code == 403
