"""
Newsletter subscription service.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database.entities.newsletter import NewsletterSubscription
from chezflora.core.database.repositories import NewsletterRepository
from chezflora.core.errors import InvalidOperationError, NotFoundError
from chezflora.core.utils import is_valid_email, normalize_email

logger = logging.getLogger(__name__)

CSV_HEADER = ["Email", "SubscribedAt"]


class NewsletterService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.subscriptions = NewsletterRepository(session)

    @staticmethod
    def _normalize(email: str) -> str:
        email = normalize_email(email)
        if not is_valid_email(email):
            raise InvalidOperationError("Invalid email address")
        return email

    async def subscribe(self, email: str) -> Tuple[NewsletterSubscription, bool]:
        """Subscribe an address; ``created`` is False when it was already subscribed."""
        email = self._normalize(email)
        existing = await self.subscriptions.get_by_email(email)
        if existing is not None:
            return existing, False
        subscription = await self.subscriptions.create(NewsletterSubscription(email=email))
        await self.session.commit()
        logger.info(f"Newsletter subscription added ({subscription.id})")
        return subscription, True

    async def unsubscribe(self, email: str) -> None:
        email = self._normalize(email)
        existing = await self.subscriptions.get_by_email(email)
        if existing is None:
            raise NotFoundError("Subscription", detail="This email is not subscribed")
        await self.session.delete(existing)
        await self.session.commit()
        logger.info(f"Newsletter subscription removed ({existing.id})")

    async def is_subscribed(self, email: str) -> bool:
        return await self.subscriptions.get_by_email(normalize_email(email)) is not None

    async def list_subscribers(self) -> List[NewsletterSubscription]:
        return await self.subscriptions.list_ordered()

    async def export_csv(self) -> str:
        """Subscribers as CSV with an ``Email,SubscribedAt`` header."""
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for subscription in await self.list_subscribers():
            writer.writerow([subscription.email, subscription.subscribed_at.isoformat()])
        return buffer.getvalue()
