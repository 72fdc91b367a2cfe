"""Unit tests for checkout and the order lifecycle."""

from decimal import Decimal

import pytest

from chezflora.core.database.entities.catalog import Product
from chezflora.core.errors import InsufficientStockError, InvalidOperationError, NotFoundError
from chezflora.core.models.io import AddressCreate, CheckoutRequest
from chezflora.server.services.addresses import AddressService
from chezflora.server.services.cart import CartService
from chezflora.server.services.orders import OrderService, shipping_cost_for


@pytest.fixture
def address_payload():
    return AddressCreate(
        first_name="Claire",
        last_name="Martin",
        address_line1="12 rue des Lilas",
        city="Lyon",
        postal_code="69003",
    )


@pytest.fixture
async def shipping_address(session, client_user, address_payload):
    return await AddressService(session, client_user).add_address(address_payload)


async def _fill_cart(session, user, *lines):
    service = CartService(session)
    cart = await service.resolve_cart(user=user)
    for product, quantity in lines:
        await service.add_item(cart, product.id, quantity)
    return cart


def _checkout_request(address_id: int, **overrides) -> CheckoutRequest:
    data = {
        "shipping_address_id": address_id,
        "billing_address_id": address_id,
        "payment_method": "card",
    }
    data.update(overrides)
    return CheckoutRequest(**data)


def test_shipping_costs():
    assert shipping_cost_for("standard") == Decimal("7.90")
    assert shipping_cost_for("express") == Decimal("12.90")


class TestCheckout:
    async def test_places_order_and_reserves_stock(
        self, session, session_maker, client_user, shipping_address, make_product
    ):
        roses = await make_product("Red roses", price="24.95", stock=5)
        tulips = await make_product("Tulips", price="3.10", stock=20)
        await _fill_cart(session, client_user, (roses, 2), (tulips, 10))

        service = OrderService(session)
        order = await service.checkout(client_user, _checkout_request(shipping_address.id, shipping_option="express"))

        assert order.status == "pending"
        assert order.subtotal == Decimal("80.90")
        assert order.shipping_cost == Decimal("12.90")
        assert order.total == Decimal("93.80")
        assert order.get_shipping_address()["city"] == "Lyon"

        view = await service.view(order)
        assert {i["product_name"]: i["quantity"] for i in view["items"]} == {"Red roses": 2, "Tulips": 10}
        assert [h["comment"] for h in view["history"]] == ["Order created"]

        async with session_maker() as check:
            assert (await check.get(Product, roses.id)).stock == 3
            assert (await check.get(Product, tulips.id)).stock == 10

        assert (await CartService(session).view(await CartService(session).resolve_cart(user=client_user))).items == []

    async def test_snapshot_survives_catalog_changes(self, session, client_user, shipping_address, make_product):
        product = await make_product("Peonies", price="15.00")
        await _fill_cart(session, client_user, (product, 1))
        service = OrderService(session)
        order = await service.checkout(client_user, _checkout_request(shipping_address.id))

        live = await session.get(Product, product.id)
        live.name = "Renamed peonies"
        live.price = Decimal("99.00")
        await session.commit()

        item = (await service.view(order))["items"][0]
        assert item["product_name"] == "Peonies"
        assert item["unit_price"] == Decimal("15.00")

    async def test_empty_cart(self, session, client_user, shipping_address):
        with pytest.raises(InvalidOperationError, match="Cart is empty"):
            await OrderService(session).checkout(client_user, _checkout_request(shipping_address.id))

    async def test_foreign_address(self, session, client_user, make_user, address_payload, make_product):
        other = await make_user("other@example.com")
        foreign = await AddressService(session, other).add_address(address_payload)
        product = await make_product("Daisies")
        await _fill_cart(session, client_user, (product, 1))

        with pytest.raises(InvalidOperationError, match="Shipping address not found"):
            await OrderService(session).checkout(client_user, _checkout_request(foreign.id))

    async def test_insufficient_stock_rolls_back(
        self, session, session_maker, client_user, shipping_address, make_product
    ):
        first = await make_product("Lilies", stock=5)
        second = await make_product("Orchid", stock=2)
        await _fill_cart(session, client_user, (first, 2), (second, 2))

        # Someone else buys the orchids meanwhile
        async with session_maker() as other:
            orchid = await other.get(Product, second.id)
            orchid.stock = 1
            await other.commit()

        with pytest.raises(InsufficientStockError, match="Insufficient stock for Orchid"):
            await OrderService(session).checkout(client_user, _checkout_request(shipping_address.id))

        async with session_maker() as check:
            assert (await check.get(Product, first.id)).stock == 5


class TestOrderStatus:
    @pytest.fixture
    async def order(self, session, client_user, shipping_address, make_product):
        product = await make_product("Sunflowers", stock=10)
        await _fill_cart(session, client_user, (product, 3))
        order = await OrderService(session).checkout(client_user, _checkout_request(shipping_address.id))
        return order, product

    async def test_admin_status_change_records_history(self, session, admin_user, order):
        placed, _ = order
        service = OrderService(session)
        updated = await service.update_status(placed.id, "shipped", actor=admin_user)

        assert updated.status == "shipped"
        history = (await service.view(updated))["history"]
        assert history[-1]["comment"] == 'Status changed to "shipped"'
        assert history[-1]["changed_by"] == admin_user.id

    async def test_cancel_restocks_and_is_final(self, session, session_maker, order):
        placed, product = order
        service = OrderService(session)
        await service.update_status(placed.id, "cancelled", comment="Out of season")

        async with session_maker() as check:
            assert (await check.get(Product, product.id)).stock == 10

        with pytest.raises(InvalidOperationError):
            await service.update_status(placed.id, "processing")

    async def test_customer_cancel(self, session, session_maker, client_user, order):
        placed, product = order
        service = OrderService(session)
        cancelled = await service.cancel_my_order(client_user, placed.id)

        assert cancelled.status == "cancelled"
        assert (await service.view(cancelled))["history"][-1]["comment"] == "Cancelled by customer"
        async with session_maker() as check:
            assert (await check.get(Product, product.id)).stock == 10

    async def test_customer_cannot_cancel_shipped_order(self, session, client_user, order):
        placed, _ = order
        service = OrderService(session)
        await service.update_status(placed.id, "shipped")

        with pytest.raises(InvalidOperationError):
            await service.cancel_my_order(client_user, placed.id)

    async def test_orders_are_private(self, session, make_user, order):
        placed, _ = order
        stranger = await make_user("stranger@example.com")
        with pytest.raises(NotFoundError):
            await OrderService(session).get_my_order(stranger, placed.id)
