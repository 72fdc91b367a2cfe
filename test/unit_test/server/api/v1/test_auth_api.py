"""Tests for registration, login and the profile endpoints."""

import pytest
from httpx import AsyncClient

DEFAULT_PASSWORD = "password123"

pytestmark = pytest.mark.asyncio

API = "/api/v1/auth"


class TestRegister:
    async def test_register_returns_token_and_client_account(self, client: AsyncClient):
        response = await client.post(
            f"{API}/register",
            json={"email": "  New.Client@Example.com ", "password": "roses-are-red", "first_name": "Emma"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["expires_in"] == 3600
        assert body["user"]["email"] == "new.client@example.com"
        assert body["user"]["role"] == "client"
        assert "password_hash" not in body["user"]

        me = await client.get(f"{API}/me", headers={"Authorization": f"Bearer {body['access_token']}"})
        assert me.json()["first_name"] == "Emma"

    async def test_duplicate_email(self, client: AsyncClient, client_user):
        response = await client.post(f"{API}/register", json={"email": "CLIENT@example.com", "password": "whatever1"})
        assert response.status_code == 409
        assert response.json() == {"detail": "An account with this email already exists", "error_type": "ConflictError"}

    @pytest.mark.parametrize(
        "payload",
        [{"email": "no-at-sign", "password": "longenough"}, {"email": "short@example.com", "password": "1234567"}],
    )
    async def test_validation(self, client: AsyncClient, payload):
        response = await client.post(f"{API}/register", json=payload)
        assert response.status_code == 422


class TestLogin:
    async def test_login(self, client: AsyncClient, client_user):
        response = await client.post(f"{API}/login", json={"email": "Client@Example.com", "password": DEFAULT_PASSWORD})

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["id"] == client_user.id
        assert body["user"]["last_login_at"] is not None

    async def test_unknown_email(self, client: AsyncClient):
        response = await client.post(f"{API}/login", json={"email": "ghost@example.com", "password": "whatever1"})
        assert response.status_code == 401
        assert response.json()["detail"] == "No account found with this email"
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_wrong_password(self, client: AsyncClient, client_user):
        response = await client.post(f"{API}/login", json={"email": client_user.email, "password": "wrong-password"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Incorrect password"

    async def test_suspended_account(self, client: AsyncClient, make_user):
        await make_user("paused@example.com", status="suspended")
        response = await client.post(f"{API}/login", json={"email": "paused@example.com", "password": DEFAULT_PASSWORD})
        assert response.status_code == 403

    async def test_login_merges_guest_cart(self, client: AsyncClient, client_user, make_product):
        product = await make_product("Tulips", stock=5)
        added = await client.post("/api/v1/cart/items", json={"product_id": product.id, "quantity": 2})
        guest_token = added.headers["X-Guest-Cart"]

        login = await client.post(
            f"{API}/login",
            json={"email": client_user.email, "password": DEFAULT_PASSWORD},
            headers={"X-Guest-Cart": guest_token},
        )
        token = login.json()["access_token"]

        cart = await client.get("/api/v1/cart", headers={"Authorization": f"Bearer {token}"})
        assert [(i["product_id"], i["quantity"]) for i in cart.json()["items"]] == [(product.id, 2)]
        assert cart.json()["guest_token"] is None


class TestProfile:
    async def test_me_requires_token(self, client: AsyncClient):
        response = await client.get(f"{API}/me")
        assert response.status_code == 401
        assert response.json()["detail"] == "Not authenticated"

    async def test_invalid_token(self, client: AsyncClient):
        response = await client.get(f"{API}/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    async def test_update_profile(self, client: AsyncClient, client_user, auth_headers):
        response = await client.patch(
            f"{API}/me", json={"last_name": "Dupont", "email": "Claire.Dupont@example.com"}, headers=auth_headers(client_user)
        )
        assert response.status_code == 200
        assert response.json()["last_name"] == "Dupont"
        assert response.json()["email"] == "claire.dupont@example.com"

    async def test_update_profile_email_taken(self, client: AsyncClient, client_user, admin_user, auth_headers):
        response = await client.patch(f"{API}/me", json={"email": admin_user.email}, headers=auth_headers(client_user))
        assert response.status_code == 409

    async def test_change_password(self, client: AsyncClient, client_user, auth_headers):
        headers = auth_headers(client_user)
        wrong = await client.post(
            f"{API}/me/password", json={"current_password": "nope", "new_password": "new-password"}, headers=headers
        )
        assert wrong.status_code == 400
        assert wrong.json()["detail"] == "Current password is incorrect"

        ok = await client.post(
            f"{API}/me/password",
            json={"current_password": DEFAULT_PASSWORD, "new_password": "new-password"},
            headers=headers,
        )
        assert ok.status_code == 204

        login = await client.post(f"{API}/login", json={"email": client_user.email, "password": "new-password"})
        assert login.status_code == 200

    async def test_logout(self, client: AsyncClient):
        assert (await client.post(f"{API}/logout")).status_code == 204
