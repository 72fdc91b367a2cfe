"""
Quote entity models.

A quote is a customer's request for a custom arrangement (wedding, event).
The shop answers by sending priced items; the customer accepts or declines.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlmodel import Field

from chezflora.core.utils import utc_now

from ..base import Base, MoneyField, TimestampField


class QuoteStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SENT = "sent"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class Quote(Base, table=True):
    """Custom arrangement request.

    Table: quotes
    """

    __tablename__ = "quotes"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True, ondelete="SET NULL")
    status: str = Field(default=QuoteStatus.PENDING.value, max_length=20, index=True)

    title: str = Field(default="Quote request", max_length=200)
    event_type: Optional[str] = Field(default=None, max_length=80)
    event_date: Optional[date] = Field(default=None)
    description: str = Field(default="")
    budget: Optional[Decimal] = MoneyField()

    customer_name: str = Field(default="", max_length=200)
    customer_email: str = Field(default="", max_length=255)
    customer_phone: Optional[str] = Field(default=None, max_length=40)
    address: Optional[str] = Field(default=None)
    notes: Optional[str] = Field(default=None)
    admin_notes: Optional[str] = Field(default=None)

    subtotal: Decimal = MoneyField(default=Decimal("0.00"))
    tax: Decimal = MoneyField(default=Decimal("0.00"))
    total: Decimal = MoneyField(default=Decimal("0.00"))
    tax_rate: Optional[Decimal] = Field(default=None, max_digits=5, decimal_places=4)
    valid_until: Optional[datetime] = TimestampField(default=None)

    created_at: datetime = TimestampField(default_factory=utc_now, index=True)
    updated_at: datetime = TimestampField(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class QuoteItem(Base, table=True):
    """Priced line of a sent quote.

    Table: quote_items
    """

    __tablename__ = "quote_items"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    quote_id: int = Field(foreign_key="quotes.id", index=True, ondelete="CASCADE")
    description: str
    quantity: int = Field(default=1)
    unit_price: Decimal = MoneyField(nullable=False)
    total: Decimal = MoneyField(nullable=False)


class QuoteStatusHistory(Base, table=True):
    """Status transition of a quote.

    Table: quote_status_history
    """

    __tablename__ = "quote_status_history"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    quote_id: int = Field(foreign_key="quotes.id", index=True, ondelete="CASCADE")
    status: str = Field(max_length=20)
    comment: Optional[str] = Field(default=None)
    changed_by: Optional[int] = Field(default=None)
    created_at: datetime = TimestampField(default_factory=utc_now)
