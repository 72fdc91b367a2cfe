"""
Shopping cart entity models.

A cart belongs to exactly one owner: a user (``user_id``) or an anonymous
visitor identified by an opaque ``guest_token``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from chezflora.core.utils import utc_now

from ..base import Base, TimestampField


class Cart(Base, table=True):
    """Shopping cart.

    Table: carts
    """

    __tablename__ = "carts"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, foreign_key="users.id", unique=True, ondelete="CASCADE")
    guest_token: Optional[str] = Field(default=None, max_length=64, unique=True, index=True)

    created_at: datetime = TimestampField(default_factory=utc_now)
    updated_at: datetime = TimestampField(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class CartItem(Base, table=True):
    """Product line in a cart.

    Table: cart_items
    """

    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_items_cart_product"),
        {"extend_existing": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    cart_id: int = Field(foreign_key="carts.id", index=True, ondelete="CASCADE")
    # No foreign key: lines for deleted products are pruned when the cart is read
    product_id: int = Field(index=True)
    quantity: int = Field(default=1)
    added_at: datetime = TimestampField(default_factory=utc_now)
