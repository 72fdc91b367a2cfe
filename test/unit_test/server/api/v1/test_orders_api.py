"""Tests for checkout and the order endpoints."""

from decimal import Decimal

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

API = "/api/v1/orders"


@pytest.fixture
async def ready_to_checkout(client: AsyncClient, client_user, auth_headers, make_product):
    """A customer with two addresses and a cart holding 2 roses and 1 vase."""
    headers = auth_headers(client_user)
    roses = await make_product("Red Roses", price="12.50", stock=5)
    vase = await make_product("Glass Vase", price="20.00", stock=3)
    await client.post("/api/v1/cart/items", json={"product_id": roses.id, "quantity": 2}, headers=headers)
    await client.post("/api/v1/cart/items", json={"product_id": vase.id, "quantity": 1}, headers=headers)

    address = {
        "first_name": "Claire",
        "last_name": "Martin",
        "address_line1": "12 rue des Lilas",
        "city": "Lyon",
        "postal_code": "69003",
    }
    shipping = (await client.post("/api/v1/addresses", json=address, headers=headers)).json()
    billing = (await client.post("/api/v1/addresses", json={**address, "type": "billing"}, headers=headers)).json()
    return {
        "headers": headers,
        "roses": roses,
        "vase": vase,
        "payload": {
            "shipping_address_id": shipping["id"],
            "billing_address_id": billing["id"],
            "payment_method": "card",
        },
    }


async def _checkout(client: AsyncClient, ctx, **overrides):
    return await client.post(f"{API}/checkout", json={**ctx["payload"], **overrides}, headers=ctx["headers"])


async def test_checkout_requires_authentication(client: AsyncClient):
    response = await client.post(f"{API}/checkout", json={})
    assert response.status_code == 401


async def test_checkout_places_order(client: AsyncClient, ready_to_checkout):
    response = await _checkout(client, ready_to_checkout, notes="Leave at the door")

    assert response.status_code == 201
    order = response.json()
    assert order["status"] == "pending"
    assert Decimal(order["subtotal"]) == Decimal("45.00")
    assert Decimal(order["shipping_cost"]) == Decimal("7.90")
    assert Decimal(order["total"]) == Decimal("52.90")
    assert order["shipping_address"]["city"] == "Lyon"
    assert order["notes"] == "Leave at the door"
    assert [(i["product_name"], i["quantity"]) for i in order["items"]] == [("Red Roses", 2), ("Glass Vase", 1)]
    assert [h["status"] for h in order["history"]] == ["pending"]

    cart = await client.get("/api/v1/cart", headers=ready_to_checkout["headers"])
    assert cart.json()["items"] == []

    product = await client.get(f"/api/v1/products/{ready_to_checkout['roses'].slug}")
    assert product.json()["stock"] == 3


async def test_express_shipping(client: AsyncClient, ready_to_checkout):
    response = await _checkout(client, ready_to_checkout, shipping_option="express")
    assert Decimal(response.json()["shipping_cost"]) == Decimal("12.90")


async def test_empty_cart_is_rejected(client: AsyncClient, ready_to_checkout):
    await client.delete("/api/v1/cart", headers=ready_to_checkout["headers"])

    response = await _checkout(client, ready_to_checkout)
    assert response.status_code == 400
    assert response.json()["detail"] == "Cart is empty"


async def test_foreign_address_is_rejected(client: AsyncClient, ready_to_checkout):
    response = await _checkout(client, ready_to_checkout, shipping_address_id=9999)
    assert response.status_code == 400
    assert response.json()["detail"] == "Shipping address not found"


async def test_my_orders(client: AsyncClient, ready_to_checkout, make_user, auth_headers):
    order = (await _checkout(client, ready_to_checkout)).json()
    headers = ready_to_checkout["headers"]

    mine = await client.get(f"{API}/mine", headers=headers)
    assert [o["id"] for o in mine.json()] == [order["id"]]
    assert (await client.get(f"{API}/mine/{order['id']}", headers=headers)).status_code == 200

    stranger = auth_headers(await make_user("stranger@example.com"))
    assert (await client.get(f"{API}/mine/{order['id']}", headers=stranger)).status_code == 404
    assert (await client.get(f"{API}/mine", headers=stranger)).json() == []


async def test_customer_cancel_restocks(client: AsyncClient, ready_to_checkout):
    order = (await _checkout(client, ready_to_checkout)).json()
    headers = ready_to_checkout["headers"]

    response = await client.post(f"{API}/mine/{order['id']}/cancel", json={"reason": "Changed my mind"}, headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "cancelled"
    assert body["history"][-1]["comment"] == "Changed my mind"

    product = await client.get(f"/api/v1/products/{ready_to_checkout['vase'].slug}")
    assert product.json()["stock"] == 3

    again = await client.post(f"{API}/mine/{order['id']}/cancel", headers=headers)
    assert again.status_code == 400


async def test_admin_status_flow(client: AsyncClient, ready_to_checkout, admin_user, auth_headers):
    order = (await _checkout(client, ready_to_checkout)).json()
    admin = auth_headers(admin_user)

    shipped = await client.put(
        f"{API}/{order['id']}/status", json={"status": "shipped", "comment": "Colissimo 123"}, headers=admin
    )
    assert shipped.status_code == 200
    assert [h["status"] for h in shipped.json()["history"]] == ["pending", "shipped"]
    assert shipped.json()["history"][-1]["changed_by"] == admin_user.id

    customer_cancel = await client.post(f"{API}/mine/{order['id']}/cancel", headers=ready_to_checkout["headers"])
    assert customer_cancel.status_code == 400
    assert customer_cancel.json()["detail"] == "Only pending or processing orders can be cancelled"

    invalid = await client.put(f"{API}/{order['id']}/status", json={"status": "lost"}, headers=admin)
    assert invalid.status_code == 422


async def test_admin_list_filters(client: AsyncClient, ready_to_checkout, admin_user, client_user, auth_headers):
    order = (await _checkout(client, ready_to_checkout)).json()
    admin = auth_headers(admin_user)

    assert [o["id"] for o in (await client.get(API, headers=admin)).json()] == [order["id"]]
    assert (await client.get(API, params={"status": "shipped"}, headers=admin)).json() == []
    by_user = await client.get(API, params={"user_id": client_user.id}, headers=admin)
    assert len(by_user.json()) == 1
    assert (await client.get(f"{API}/{order['id']}", headers=admin)).json()["user_id"] == client_user.id
    assert (await client.get(f"{API}/9999", headers=admin)).status_code == 404


async def test_admin_routes_need_admin(client: AsyncClient, client_user, auth_headers):
    assert (await client.get(API, headers=auth_headers(client_user))).status_code == 403
