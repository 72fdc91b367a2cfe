"""
Cart repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.carts import Cart, CartItem
from .base import AsyncBaseRepository


class CartRepository(AsyncBaseRepository[Cart]):
    """Repository for carts and their lines."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Cart)

    async def get_by_user(self, user_id: int) -> Optional[Cart]:
        result = await self.session.execute(select(Cart).where(Cart.user_id == user_id))
        return result.scalars().first()

    async def get_by_token(self, guest_token: str) -> Optional[Cart]:
        stmt = select(Cart).where(Cart.guest_token == guest_token, Cart.user_id.is_(None))
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def items(self, cart_id: int) -> List[CartItem]:
        stmt = select(CartItem).where(CartItem.cart_id == cart_id).order_by(CartItem.added_at, CartItem.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_item(self, cart_id: int, product_id: int) -> Optional[CartItem]:
        stmt = select(CartItem).where(CartItem.cart_id == cart_id, CartItem.product_id == product_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def add_item(self, item: CartItem) -> CartItem:
        self.session.add(item)
        await self.session.flush()
        return item

    async def remove_item(self, item: CartItem) -> None:
        await self.session.delete(item)
        await self.session.flush()

    async def clear(self, cart_id: int) -> None:
        await self.session.execute(delete(CartItem).where(CartItem.cart_id == cart_id))

    async def remove_product_everywhere(self, product_id: int) -> None:
        await self.session.execute(delete(CartItem).where(CartItem.product_id == product_id))

    async def delete_cart(self, cart: Cart) -> None:
        await self.clear(cart.id)
        await self.session.delete(cart)
        await self.session.flush()
