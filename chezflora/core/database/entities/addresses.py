"""
Customer address entity model.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field

from chezflora.core.utils import utc_now

from ..base import Base, TimestampField


class AddressType(str, Enum):
    SHIPPING = "shipping"
    BILLING = "billing"


class Address(Base, table=True):
    """Shipping or billing address owned by a user.

    At most one address per (user, type) has ``is_default`` set.

    Table: addresses
    """

    __tablename__ = "addresses"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    type: str = Field(default=AddressType.SHIPPING.value, max_length=20)
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    address_line1: str = Field(max_length=255)
    address_line2: Optional[str] = Field(default=None, max_length=255)
    city: str = Field(max_length=100)
    postal_code: str = Field(max_length=20)
    country: str = Field(default="France", max_length=100)
    phone: Optional[str] = Field(default=None, max_length=40)
    is_default: bool = Field(default=False)

    created_at: datetime = TimestampField(default_factory=utc_now)
    updated_at: datetime = TimestampField(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def snapshot(self) -> dict:
        """Plain copy stored on orders so later edits do not rewrite history."""
        return {
            "type": self.type,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "address_line1": self.address_line1,
            "address_line2": self.address_line2,
            "city": self.city,
            "postal_code": self.postal_code,
            "country": self.country,
            "phone": self.phone,
        }
