"""
Quote repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.quotes import Quote, QuoteItem, QuoteStatusHistory
from .base import AsyncBaseRepository, QueryBuilder


class QuoteRepository(AsyncBaseRepository[Quote]):
    """Repository for quotes, their items and status history."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Quote)

    async def search(
        self,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Quote]:
        stmt = QueryBuilder.apply_filters(select(Quote), Quote, {"user_id": user_id, "status": status})
        stmt = stmt.order_by(Quote.created_at.desc(), Quote.id.desc())
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def items(self, quote_id: int) -> List[QuoteItem]:
        stmt = select(QuoteItem).where(QuoteItem.quote_id == quote_id).order_by(QuoteItem.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def replace_items(self, quote_id: int, items: List[QuoteItem]) -> None:
        await self.session.execute(delete(QuoteItem).where(QuoteItem.quote_id == quote_id))
        self.session.add_all(items)
        await self.session.flush()

    async def history(self, quote_id: int) -> List[QuoteStatusHistory]:
        stmt = (
            select(QuoteStatusHistory)
            .where(QuoteStatusHistory.quote_id == quote_id)
            .order_by(QuoteStatusHistory.created_at, QuoteStatusHistory.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_history(self, entry: QuoteStatusHistory) -> None:
        self.session.add(entry)
        await self.session.flush()

    async def delete_with_children(self, quote: Quote) -> None:
        await self.session.execute(delete(QuoteItem).where(QuoteItem.quote_id == quote.id))
        await self.session.execute(delete(QuoteStatusHistory).where(QuoteStatusHistory.quote_id == quote.id))
        await self.session.delete(quote)
        await self.session.flush()

    async def detach_user(self, user_id: int) -> None:
        await self.session.execute(update(Quote).where(Quote.user_id == user_id).values(user_id=None))
