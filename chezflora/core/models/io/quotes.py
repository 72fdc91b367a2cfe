"""
Quote I/O models.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from chezflora.core.database.entities.quotes import QuoteStatus
from chezflora.core.utils import to_naive_utc

from .orders import StatusHistoryRead


class QuoteCreate(BaseModel):
    title: str = Field(default="Quote request", min_length=1, max_length=200)
    event_type: Optional[str] = Field(default=None, max_length=80)
    event_date: Optional[date] = None
    description: str = Field(min_length=1)
    budget: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    phone: Optional[str] = Field(default=None, max_length=40)
    address: Optional[str] = None
    notes: Optional[str] = None


class QuoteUpdate(BaseModel):
    """Back-office edit of a quote's details and internal notes."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    event_type: Optional[str] = Field(default=None, max_length=80)
    event_date: Optional[date] = None
    description: Optional[str] = None
    budget: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    notes: Optional[str] = None
    admin_notes: Optional[str] = None


class QuoteStatusUpdate(BaseModel):
    status: QuoteStatus
    comment: Optional[str] = None


class QuoteItemIn(BaseModel):
    description: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)
    unit_price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)


class QuoteSend(BaseModel):
    items: List[QuoteItemIn] = Field(min_length=1)
    tax_rate: Optional[Decimal] = Field(default=None, ge=0, le=1, description="Defaults to the configured rate")
    valid_until: Optional[datetime] = Field(default=None, description="Defaults to now plus the validity period")
    comment: Optional[str] = None

    @field_validator("valid_until")
    @classmethod
    def _naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class QuoteDecision(BaseModel):
    comment: Optional[str] = None


class QuoteItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    quantity: int
    unit_price: Decimal
    total: Decimal


class QuoteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int] = None
    status: QuoteStatus
    title: str
    event_type: Optional[str] = None
    event_date: Optional[date] = None
    description: str
    budget: Optional[Decimal] = None
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    admin_notes: Optional[str] = None
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    tax_rate: Optional[Decimal] = None
    valid_until: Optional[datetime] = None
    items: List[QuoteItemRead] = Field(default_factory=list)
    history: List[StatusHistoryRead] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
