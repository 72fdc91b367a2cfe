"""
Order repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.orders import Order, OrderItem, OrderStatusHistory
from .base import AsyncBaseRepository, QueryBuilder


class OrderRepository(AsyncBaseRepository[Order]):
    """Repository for orders, their lines and status history."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Order)

    async def search(
        self,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Order]:
        """Orders newest first, optionally restricted to one customer or status."""
        stmt = QueryBuilder.apply_filters(select(Order), Order, {"user_id": user_id, "status": status})
        stmt = stmt.order_by(Order.created_at.desc(), Order.id.desc())
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def items(self, order_id: int) -> List[OrderItem]:
        stmt = select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def history(self, order_id: int) -> List[OrderStatusHistory]:
        stmt = (
            select(OrderStatusHistory)
            .where(OrderStatusHistory.order_id == order_id)
            .order_by(OrderStatusHistory.created_at, OrderStatusHistory.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_item(self, item: OrderItem) -> None:
        self.session.add(item)

    async def add_history(self, entry: OrderStatusHistory) -> None:
        self.session.add(entry)
        await self.session.flush()

    async def detach_user(self, user_id: int) -> None:
        await self.session.execute(update(Order).where(Order.user_id == user_id).values(user_id=None))
