"""
Cart service.

A cart is owned by a signed-in user or by a guest holding an opaque token
(sent in the ``X-Guest-Cart`` header). Lines are validated against current
stock on every write, and reading a cart drops lines whose product has been
deleted or deactivated.
"""

from __future__ import annotations

import logging
import secrets
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database.entities.carts import Cart, CartItem
from chezflora.core.database.entities.catalog import Product
from chezflora.core.database.entities.users import User
from chezflora.core.database.repositories import CartRepository, ProductRepository
from chezflora.core.errors import InsufficientStockError, NotFoundError
from chezflora.core.models.io import CartItemRead, CartRead
from chezflora.core.utils import money
from chezflora.server.core.config import settings

logger = logging.getLogger(__name__)


def new_guest_token() -> str:
    return secrets.token_urlsafe(24)


def _stock_error(product: Product) -> InsufficientStockError:
    return InsufficientStockError(
        f"Requested quantity exceeds available stock ({product.stock})", available=product.stock
    )


class CartService:
    """Service for user and guest carts."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.carts = CartRepository(session)
        self.products = ProductRepository(session)

    async def resolve_cart(self, user: Optional[User] = None, guest_token: Optional[str] = None) -> Cart:
        """
        Find the caller's cart, creating it when needed.

        A signed-in user always gets their own cart. Otherwise the guest cart
        matching ``guest_token`` is returned, and a fresh guest cart with a
        new token is created when the token is missing or unknown.
        """
        if user is not None:
            cart = await self.carts.get_by_user(user.id)
            if cart is None:
                cart = await self.carts.create(Cart(user_id=user.id))
                await self.session.commit()
            return cart

        if guest_token:
            cart = await self.carts.get_by_token(guest_token)
            if cart is not None:
                return cart
        cart = await self.carts.create(Cart(guest_token=new_guest_token()))
        await self.session.commit()
        logger.debug(f"Created guest cart {cart.id}")
        return cart

    async def _active_product(self, product_id: int) -> Product:
        product = await self.products.get_by_id(product_id)
        if product is None or not product.is_active:
            raise NotFoundError("Product", product_id)
        return product

    async def view(self, cart: Cart) -> CartRead:
        """Cart contents with line totals; unavailable products are removed first."""
        items = await self.carts.items(cart.id)
        products = await self.products.get_many(i.product_id for i in items)

        lines = []
        stale = False
        for item in items:
            product = products.get(item.product_id)
            if product is None or not product.is_active:
                await self.session.delete(item)
                stale = True
                continue
            unit_price = money(product.price)
            lines.append(
                CartItemRead(
                    product_id=product.id,
                    name=product.name,
                    slug=product.slug,
                    unit_price=unit_price,
                    image=product.main_image,
                    quantity=item.quantity,
                    stock=product.stock,
                    line_total=money(unit_price * item.quantity),
                )
            )
        if stale:
            await self.session.commit()
            logger.info(f"Removed unavailable products from cart {cart.id}")

        return CartRead(
            id=cart.id,
            guest_token=cart.guest_token,
            items=lines,
            item_count=sum(line.quantity for line in lines),
            subtotal=money(sum((line.line_total for line in lines), Decimal("0"))),
            currency=settings.shop.currency,
        )

    async def add_item(self, cart: Cart, product_id: int, quantity: int = 1) -> Cart:
        """
        Add ``quantity`` of a product, summing with an existing line.

        Raises:
            NotFoundError: If the product does not exist or is inactive
            InsufficientStockError: If the resulting quantity exceeds stock
        """
        product = await self._active_product(product_id)
        item = await self.carts.get_item(cart.id, product_id)
        new_quantity = quantity + (item.quantity if item else 0)
        if new_quantity > product.stock:
            raise _stock_error(product)
        if item is None:
            await self.carts.add_item(CartItem(cart_id=cart.id, product_id=product_id, quantity=new_quantity))
        else:
            item.quantity = new_quantity
            self.session.add(item)
        await self.carts.update(cart)
        await self.session.commit()
        return cart

    async def update_item(self, cart: Cart, product_id: int, quantity: int) -> Cart:
        """Set a line's quantity; zero or less removes the line."""
        item = await self.carts.get_item(cart.id, product_id)
        if item is None:
            raise NotFoundError("Cart item", product_id, detail=f"Product {product_id} is not in the cart")
        if quantity <= 0:
            await self.carts.remove_item(item)
        else:
            product = await self._active_product(product_id)
            if quantity > product.stock:
                raise _stock_error(product)
            item.quantity = quantity
            self.session.add(item)
        await self.carts.update(cart)
        await self.session.commit()
        return cart

    async def remove_item(self, cart: Cart, product_id: int) -> Cart:
        item = await self.carts.get_item(cart.id, product_id)
        if item is None:
            raise NotFoundError("Cart item", product_id, detail=f"Product {product_id} is not in the cart")
        await self.carts.remove_item(item)
        await self.carts.update(cart)
        await self.session.commit()
        return cart

    async def clear(self, cart: Cart) -> Cart:
        await self.carts.clear(cart.id)
        await self.carts.update(cart)
        await self.session.commit()
        return cart

    async def merge_guest_cart(self, user: User, guest_token: str) -> Cart:
        """
        Fold a guest cart into the user's cart and delete it.

        Quantities of products present in both carts are added and capped at
        the current stock. Unknown tokens leave the user's cart untouched.
        """
        cart = await self.resolve_cart(user=user)
        guest = await self.carts.get_by_token(guest_token)
        if guest is None:
            return cart

        guest_items = await self.carts.items(guest.id)
        products = await self.products.get_many(i.product_id for i in guest_items)
        merged = 0
        for guest_item in guest_items:
            product = products.get(guest_item.product_id)
            if product is None or not product.is_active or product.stock <= 0:
                continue
            item = await self.carts.get_item(cart.id, product.id)
            current = item.quantity if item else 0
            quantity = min(current + guest_item.quantity, product.stock)
            if item is None:
                await self.carts.add_item(CartItem(cart_id=cart.id, product_id=product.id, quantity=quantity))
            else:
                item.quantity = quantity
                self.session.add(item)
            merged += 1

        await self.carts.delete_cart(guest)
        await self.carts.update(cart)
        await self.session.commit()
        logger.info(f"Merged guest cart {guest.id} into cart {cart.id} of user {user.id} ({merged} line(s))")
        return cart
