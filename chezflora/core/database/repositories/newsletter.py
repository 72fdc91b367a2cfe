"""
Newsletter subscription repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.newsletter import NewsletterSubscription
from .base import AsyncBaseRepository


class NewsletterRepository(AsyncBaseRepository[NewsletterSubscription]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, NewsletterSubscription)

    async def get_by_email(self, email: str) -> Optional[NewsletterSubscription]:
        stmt = select(NewsletterSubscription).where(NewsletterSubscription.email == email)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_ordered(self) -> List[NewsletterSubscription]:
        """Subscribers, oldest subscription first."""
        stmt = select(NewsletterSubscription).order_by(
            NewsletterSubscription.subscribed_at, NewsletterSubscription.id
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
