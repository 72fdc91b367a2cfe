"""
Cart I/O models.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class CartItemAdd(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)


class CartItemUpdate(BaseModel):
    quantity: int = Field(description="New quantity; zero or less removes the line")


class CartMerge(BaseModel):
    guest_token: str = Field(min_length=1)


class CartItemRead(BaseModel):
    product_id: int
    name: str
    slug: str
    unit_price: Decimal
    image: Optional[str] = None
    quantity: int
    stock: int
    line_total: Decimal


class CartRead(BaseModel):
    """Cart contents with computed totals.

    ``guest_token`` is set for guest carts; clients send it back in the
    ``X-Guest-Cart`` header.
    """

    id: int
    guest_token: Optional[str] = None
    items: List[CartItemRead] = Field(default_factory=list)
    item_count: int = 0
    subtotal: Decimal = Decimal("0.00")
    currency: str = "EUR"
