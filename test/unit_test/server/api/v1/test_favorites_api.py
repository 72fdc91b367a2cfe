"""Tests for the favorites endpoints."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

API = "/api/v1/favorites"


async def test_requires_authentication(client: AsyncClient):
    assert (await client.get(API)).status_code == 401


async def test_add_list_remove(client: AsyncClient, client_user, auth_headers, make_product):
    headers = auth_headers(client_user)
    peonies = await make_product("Peonies")
    orchid = await make_product("Orchid")

    first = await client.post(f"{API}/{peonies.id}", headers=headers)
    assert first.status_code == 201
    assert first.json()["product"]["name"] == "Peonies"

    again = await client.post(f"{API}/{peonies.id}", headers=headers)
    assert again.status_code == 200

    await client.post(f"{API}/{orchid.id}", headers=headers)
    listed = await client.get(API, headers=headers)
    assert [f["product"]["name"] for f in listed.json()] == ["Orchid", "Peonies"]

    assert (await client.delete(f"{API}/{peonies.id}", headers=headers)).status_code == 204
    assert (await client.delete(f"{API}/{peonies.id}", headers=headers)).status_code == 404
    assert len((await client.get(API, headers=headers)).json()) == 1


async def test_unknown_or_inactive_product(client: AsyncClient, client_user, auth_headers, make_product):
    headers = auth_headers(client_user)
    hidden = await make_product("Hidden", is_active=False)

    assert (await client.post(f"{API}/999", headers=headers)).status_code == 404
    assert (await client.post(f"{API}/{hidden.id}", headers=headers)).status_code == 404


async def test_favorites_are_per_user(client: AsyncClient, client_user, make_user, auth_headers, make_product):
    other = await make_user("other@example.com")
    product = await make_product("Peonies")
    await client.post(f"{API}/{product.id}", headers=auth_headers(client_user))

    assert (await client.get(API, headers=auth_headers(other))).json() == []
