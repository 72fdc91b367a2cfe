"""
Quote service.

Customers request a quote for a custom arrangement; the shop prices it and
sends it; the customer accepts or declines before ``valid_until``. A sent
quote found past its validity is marked expired when the customer tries to
answer it.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database.entities.quotes import Quote, QuoteItem, QuoteStatus, QuoteStatusHistory
from chezflora.core.database.entities.users import User
from chezflora.core.database.repositories import QuoteRepository
from chezflora.core.errors import InvalidOperationError, NotFoundError
from chezflora.core.models.io import QuoteCreate, QuoteSend
from chezflora.core.monitoring import log_business_event
from chezflora.core.utils import money, utc_now
from chezflora.server.core.config import settings

logger = logging.getLogger(__name__)

CLOSED_FOR_CANCEL = (
    QuoteStatus.ACCEPTED.value,
    QuoteStatus.DECLINED.value,
    QuoteStatus.EXPIRED.value,
    QuoteStatus.CANCELLED.value,
)
NOT_SENDABLE = (QuoteStatus.ACCEPTED.value, QuoteStatus.CANCELLED.value)


class QuoteService:
    """Service for quote requests and their pricing workflow."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.quotes = QuoteRepository(session)

    async def view(self, quote: Quote) -> Dict[str, Any]:
        data = quote.model_dump()
        data["items"] = [item.model_dump() for item in await self.quotes.items(quote.id)]
        data["history"] = [entry.model_dump() for entry in await self.quotes.history(quote.id)]
        return data

    async def _set_status(self, quote: Quote, status: str, comment: str, actor_id: Optional[int]) -> Quote:
        previous = quote.status
        quote.status = status
        quote = await self.quotes.update(quote)
        await self.quotes.add_history(
            QuoteStatusHistory(quote_id=quote.id, status=status, comment=comment, changed_by=actor_id)
        )
        logger.info(f"Quote {quote.id} status {previous} -> {status}")
        return quote

    async def create_quote(self, user: User, data: QuoteCreate) -> Quote:
        quote = await self.quotes.create(
            Quote(
                user_id=user.id,
                status=QuoteStatus.PENDING.value,
                title=data.title,
                event_type=data.event_type,
                event_date=data.event_date,
                description=data.description,
                budget=data.budget,
                customer_name=user.full_name,
                customer_email=user.email,
                customer_phone=data.phone,
                address=data.address,
                notes=data.notes,
            )
        )
        await self.quotes.add_history(
            QuoteStatusHistory(
                quote_id=quote.id, status=quote.status, comment="Quote request created", changed_by=user.id
            )
        )
        await self.session.commit()
        log_business_event("quote.requested", quote_id=quote.id, user_id=user.id)
        return quote

    async def list_my_quotes(self, user: User) -> List[Quote]:
        return await self.quotes.search(user_id=user.id)

    async def get_my_quote(self, user: User, quote_id: int) -> Quote:
        quote = await self.quotes.get_by_id(quote_id)
        if quote is None or quote.user_id != user.id:
            raise NotFoundError("Quote", quote_id)
        return quote

    async def list_quotes(
        self, status: Optional[str] = None, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[Quote]:
        return await self.quotes.search(status=status, limit=limit, offset=offset)

    async def get_quote(self, quote_id: int) -> Quote:
        quote = await self.quotes.get_by_id(quote_id)
        if quote is None:
            raise NotFoundError("Quote", quote_id)
        return quote

    async def update_quote(self, quote_id: int, fields: Dict[str, Any]) -> Quote:
        quote = await self.get_quote(quote_id)
        for key, value in fields.items():
            if value is None and key in ("title", "description"):
                continue
            setattr(quote, key, value)
        quote = await self.quotes.update(quote)
        await self.session.commit()
        return quote

    async def update_status(
        self, quote_id: int, status: str, comment: Optional[str] = None, actor: Optional[User] = None
    ) -> Quote:
        quote = await self.get_quote(quote_id)
        quote = await self._set_status(
            quote, status, comment or f'Status changed to "{status}"', actor.id if actor else None
        )
        await self.session.commit()
        return quote

    async def send_quote(self, quote_id: int, data: QuoteSend, actor: Optional[User] = None) -> Quote:
        """
        Price a quote and send it to the customer.

        Subtotal is the sum of the item totals; tax uses ``data.tax_rate`` or
        the configured default; ``valid_until`` defaults to now plus the
        configured validity period.
        """
        quote = await self.get_quote(quote_id)
        if quote.status in NOT_SENDABLE:
            raise InvalidOperationError(f"A quote that is {quote.status} cannot be sent")
        now = utc_now()
        if data.valid_until is not None and data.valid_until <= now:
            raise InvalidOperationError("valid_until must be in the future")

        items = [
            QuoteItem(
                quote_id=quote.id,
                description=item.description,
                quantity=item.quantity,
                unit_price=money(item.unit_price),
                total=money(item.unit_price * item.quantity),
            )
            for item in data.items
        ]
        subtotal = money(sum((item.total for item in items), Decimal("0")))
        tax_rate = data.tax_rate if data.tax_rate is not None else settings.shop.quote_tax_rate
        tax = money(subtotal * tax_rate)
        await self.quotes.replace_items(quote.id, items)

        quote.subtotal = subtotal
        quote.tax_rate = tax_rate
        quote.tax = tax
        quote.total = money(subtotal + tax)
        quote.valid_until = data.valid_until or now + timedelta(days=settings.shop.quote_validity_days)
        quote = await self._set_status(
            quote, QuoteStatus.SENT.value, data.comment or "Quote sent to customer", actor.id if actor else None
        )
        await self.session.commit()
        log_business_event("quote.sent", quote_id=quote.id, total=str(quote.total))
        return quote

    async def _answerable(self, user: User, quote_id: int, verb: str) -> Quote:
        quote = await self.get_my_quote(user, quote_id)
        if quote.status != QuoteStatus.SENT.value:
            raise InvalidOperationError(f"Only sent quotes can be {verb} (current status: {quote.status})")
        if quote.valid_until is not None and quote.valid_until < utc_now():
            await self._set_status(quote, QuoteStatus.EXPIRED.value, "Quote expired", None)
            await self.session.commit()
            raise InvalidOperationError("This quote has expired")
        return quote

    async def accept_quote(self, user: User, quote_id: int, comment: Optional[str] = None) -> Quote:
        quote = await self._answerable(user, quote_id, "accepted")
        quote = await self._set_status(quote, QuoteStatus.ACCEPTED.value, comment or "Quote accepted by customer", user.id)
        await self.session.commit()
        log_business_event("quote.accepted", quote_id=quote.id, total=str(quote.total))
        return quote

    async def decline_quote(self, user: User, quote_id: int, comment: Optional[str] = None) -> Quote:
        quote = await self._answerable(user, quote_id, "declined")
        quote = await self._set_status(quote, QuoteStatus.DECLINED.value, comment or "Quote declined by customer", user.id)
        await self.session.commit()
        return quote

    async def cancel_my_quote(self, user: User, quote_id: int, reason: Optional[str] = None) -> Quote:
        quote = await self.get_my_quote(user, quote_id)
        if quote.status in CLOSED_FOR_CANCEL:
            raise InvalidOperationError(f"A quote that is {quote.status} cannot be cancelled")
        quote = await self._set_status(quote, QuoteStatus.CANCELLED.value, reason or "Cancelled by customer", user.id)
        await self.session.commit()
        return quote

    async def delete_quote(self, quote_id: int) -> None:
        quote = await self.get_quote(quote_id)
        await self.quotes.delete_with_children(quote)
        await self.session.commit()
        logger.info(f"Deleted quote {quote_id}")
