"""
Order service.

Checkout turns the user's cart into an order in a single transaction:
stock is reserved with a conditional UPDATE per line, the lines and both
addresses are snapshotted, and the cart is emptied. Any failure rolls the
whole thing back.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database.entities.orders import (
    Order,
    OrderItem,
    OrderStatus,
    OrderStatusHistory,
    ShippingOption,
)
from chezflora.core.database.entities.users import User
from chezflora.core.database.repositories import AddressRepository, CartRepository, OrderRepository, ProductRepository
from chezflora.core.errors import InsufficientStockError, InvalidOperationError, NotFoundError
from chezflora.core.models.io import CheckoutRequest
from chezflora.core.monitoring import business_span, log_business_event
from chezflora.core.utils import money
from chezflora.server.core.config import settings

logger = logging.getLogger(__name__)

CUSTOMER_CANCELLABLE = (OrderStatus.PENDING.value, OrderStatus.PROCESSING.value)


def shipping_cost_for(option: str) -> Decimal:
    if option == ShippingOption.EXPRESS.value:
        return money(settings.shop.express_shipping_cost)
    return money(settings.shop.standard_shipping_cost)


class OrderService:
    """Service for checkout and the order lifecycle."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.orders = OrderRepository(session)
        self.products = ProductRepository(session)
        self.carts = CartRepository(session)
        self.addresses = AddressRepository(session)

    async def view(self, order: Order) -> Dict[str, Any]:
        """Order fields with its lines and status history, ready for ``OrderRead``."""
        items = await self.orders.items(order.id)
        history = await self.orders.history(order.id)
        data = order.model_dump()
        data["shipping_address"] = order.get_shipping_address()
        data["billing_address"] = order.get_billing_address()
        data["items"] = [{**item.model_dump(), "line_total": money(item.line_total)} for item in items]
        data["history"] = [entry.model_dump() for entry in history]
        return data

    async def _add_history(self, order: Order, comment: str, actor_id: Optional[int]) -> None:
        await self.orders.add_history(
            OrderStatusHistory(order_id=order.id, status=order.status, comment=comment, changed_by=actor_id)
        )

    async def checkout(self, user: User, data: CheckoutRequest) -> Order:
        """
        Place an order from the user's cart.

        Raises:
            InvalidOperationError: Empty cart or an address that is not the user's
            InsufficientStockError: A line asks for more than is in stock
        """
        try:
            with business_span("order.checkout", user_id=user.id):
                order = await self._checkout(user, data)
        except Exception:
            await self.session.rollback()
            raise
        await self.session.commit()
        logger.info(f"Order {order.id} placed by user {user.id}: total={order.total}")
        log_business_event("order.created", order_id=order.id, user_id=user.id, total=str(order.total))
        return order

    async def _checkout(self, user: User, data: CheckoutRequest) -> Order:
        cart = await self.carts.get_by_user(user.id)
        cart_items = await self.carts.items(cart.id) if cart else []
        if not cart_items:
            raise InvalidOperationError("Cart is empty")

        shipping = await self.addresses.get_for_user(user.id, data.shipping_address_id)
        if shipping is None:
            raise InvalidOperationError("Shipping address not found")
        billing = await self.addresses.get_for_user(user.id, data.billing_address_id)
        if billing is None:
            raise InvalidOperationError("Billing address not found")

        products = await self.products.get_many(i.product_id for i in cart_items)
        lines: List[OrderItem] = []
        subtotal = Decimal("0.00")
        for cart_item in cart_items:
            product = products.get(cart_item.product_id)
            if product is None or not product.is_active:
                raise InvalidOperationError(f"Product {cart_item.product_id} is no longer available")
            name = product.name
            unit_price = money(product.price)
            image = product.main_image
            if not await self.products.decrement_stock(product.id, cart_item.quantity):
                raise InsufficientStockError(f"Insufficient stock for {name}", available=product.stock)
            lines.append(
                OrderItem(
                    order_id=0,
                    product_id=product.id,
                    product_name=name,
                    unit_price=unit_price,
                    quantity=cart_item.quantity,
                    image=image,
                )
            )
            subtotal += unit_price * cart_item.quantity

        shipping_cost = shipping_cost_for(data.shipping_option.value)
        order = Order(
            user_id=user.id,
            status=OrderStatus.PENDING.value,
            subtotal=money(subtotal),
            shipping_cost=shipping_cost,
            total=money(subtotal + shipping_cost),
            shipping_option=data.shipping_option.value,
            payment_method=data.payment_method,
            notes=data.notes,
        )
        order.set_shipping_address(shipping.snapshot())
        order.set_billing_address(billing.snapshot())
        order = await self.orders.create(order)

        for line in lines:
            line.order_id = order.id
            await self.orders.add_item(line)
        await self._add_history(order, "Order created", user.id)
        await self.carts.clear(cart.id)
        return order

    async def list_my_orders(self, user: User) -> List[Order]:
        return await self.orders.search(user_id=user.id)

    async def get_my_order(self, user: User, order_id: int) -> Order:
        order = await self.orders.get_by_id(order_id)
        if order is None or order.user_id != user.id:
            raise NotFoundError("Order", order_id)
        return order

    async def list_orders(
        self,
        status: Optional[str] = None,
        user_id: Optional[int] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Order]:
        return await self.orders.search(user_id=user_id, status=status, limit=limit, offset=offset)

    async def get_order(self, order_id: int) -> Order:
        order = await self.orders.get_by_id(order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        return order

    async def _restock(self, order: Order) -> None:
        for item in await self.orders.items(order.id):
            if item.product_id is not None:
                await self.products.adjust_stock(item.product_id, item.quantity)

    async def update_status(
        self, order_id: int, status: str, comment: Optional[str] = None, actor: Optional[User] = None
    ) -> Order:
        """
        Move an order to ``status`` and record the change.

        Entering ``cancelled`` puts the ordered quantities back in stock.

        Raises:
            InvalidOperationError: If the order is already cancelled
        """
        order = await self.get_order(order_id)
        if order.status == OrderStatus.CANCELLED.value and status != OrderStatus.CANCELLED.value:
            raise InvalidOperationError("A cancelled order cannot change status")

        if status == OrderStatus.CANCELLED.value and order.status != OrderStatus.CANCELLED.value:
            await self._restock(order)
        previous = order.status
        order.status = status
        order = await self.orders.update(order)
        await self._add_history(order, comment or f'Status changed to "{status}"', actor.id if actor else None)
        await self.session.commit()
        logger.info(f"Order {order.id} status {previous} -> {status}")
        log_business_event("order.status_changed", order_id=order.id, previous=previous, status=status)
        return order

    async def cancel_my_order(self, user: User, order_id: int, reason: Optional[str] = None) -> Order:
        order = await self.get_my_order(user, order_id)
        if order.status not in CUSTOMER_CANCELLABLE:
            raise InvalidOperationError("Only pending or processing orders can be cancelled")
        await self._restock(order)
        order.status = OrderStatus.CANCELLED.value
        order = await self.orders.update(order)
        await self._add_history(order, reason or "Cancelled by customer", user.id)
        await self.session.commit()
        logger.info(f"Order {order.id} cancelled by user {user.id}")
        log_business_event("order.cancelled", order_id=order.id, user_id=user.id)
        return order
