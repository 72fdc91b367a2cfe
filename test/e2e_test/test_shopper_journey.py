"""
End-to-end shopper journeys through the HTTP API.

A visitor fills a guest cart, signs up (which merges the cart), checks out,
and the shop staff ships the order.
"""

from decimal import Decimal

import pytest
from httpx import AsyncClient

pytestmark = [pytest.mark.asyncio, pytest.mark.e2e]

API = "/api/v1"


async def test_guest_to_delivered_order(client: AsyncClient, admin_user, auth_headers, make_category, make_product):
    bouquets = await make_category("Bouquets")
    peonies = await make_product("Peony Bouquet", price="39.90", stock=4, category_id=bouquets.id)
    card = await make_product("Greeting Card", price="3.50", stock=50)

    # Browse and fill a guest cart
    listing = await client.get(f"{API}/products", params={"category": "bouquets"})
    assert [p["slug"] for p in listing.json()] == ["peony-bouquet"]

    first = await client.post(f"{API}/cart/items", json={"product_id": peonies.id, "quantity": 2})
    guest_token = first.headers["X-Guest-Cart"]
    guest = {"X-Guest-Cart": guest_token}
    await client.post(f"{API}/cart/items", json={"product_id": card.id}, headers=guest)

    # Sign up with the guest cart attached
    registered = await client.post(
        f"{API}/auth/register",
        json={"email": "Lea@Example.com", "password": "bouquet2024", "first_name": "Léa", "last_name": "Petit"},
        headers=guest,
    )
    assert registered.status_code == 201
    headers = {"Authorization": f"Bearer {registered.json()['access_token']}"}

    cart = (await client.get(f"{API}/cart", headers=headers)).json()
    assert cart["guest_token"] is None
    assert {i["product_id"]: i["quantity"] for i in cart["items"]} == {peonies.id: 2, card.id: 1}
    assert Decimal(cart["subtotal"]) == Decimal("83.30")

    # Address book and checkout
    address = (
        await client.post(
            f"{API}/addresses",
            json={
                "first_name": "Léa",
                "last_name": "Petit",
                "address_line1": "3 place Bellecour",
                "city": "Lyon",
                "postal_code": "69002",
            },
            headers=headers,
        )
    ).json()
    placed = await client.post(
        f"{API}/orders/checkout",
        json={
            "shipping_address_id": address["id"],
            "billing_address_id": address["id"],
            "shipping_option": "express",
            "payment_method": "card",
        },
        headers=headers,
    )
    assert placed.status_code == 201
    order = placed.json()
    assert Decimal(order["total"]) == Decimal("96.20")
    assert (await client.get(f"{API}/products/peony-bouquet")).json()["stock"] == 2

    # The shop processes and ships the order
    admin = auth_headers(admin_user)
    for next_status in ("processing", "shipped"):
        response = await client.put(f"{API}/orders/{order['id']}/status", json={"status": next_status}, headers=admin)
        assert response.status_code == 200

    # Too late for the customer to cancel
    cancel = await client.post(f"{API}/orders/mine/{order['id']}/cancel", headers=headers)
    assert cancel.status_code == 400

    mine = (await client.get(f"{API}/orders/mine/{order['id']}", headers=headers)).json()
    assert mine["status"] == "shipped"
    assert [h["status"] for h in mine["history"]] == ["pending", "processing", "shipped"]


async def test_quote_request_journey(client: AsyncClient, admin_user, auth_headers):
    registered = await client.post(
        f"{API}/auth/register",
        json={"email": "events@example.com", "password": "weddings2024", "first_name": "Hugo", "last_name": "Roux"},
    )
    headers = {"Authorization": f"Bearer {registered.json()['access_token']}"}

    quote = (
        await client.post(
            f"{API}/quotes",
            json={"title": "Gala dinner", "description": "20 centrepieces in white and green"},
            headers=headers,
        )
    ).json()
    assert quote["customer_name"] == "Hugo Roux"

    sent = await client.post(
        f"{API}/quotes/{quote['id']}/send",
        json={"items": [{"description": "Centrepiece", "quantity": 20, "unit_price": "45.00"}]},
        headers=auth_headers(admin_user),
    )
    assert Decimal(sent.json()["total"]) == Decimal("1080.00")

    accepted = await client.post(f"{API}/quotes/mine/{quote['id']}/accept", headers=headers)
    assert accepted.json()["status"] == "accepted"
