"""
Order entity models.

Orders snapshot everything they need at checkout time: the product name,
unit price and image of every line, and both addresses. Later catalog or
address edits never change a placed order.
"""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from sqlmodel import Field

from chezflora.core.utils import utc_now

from ..base import Base, MoneyField, TimestampField


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class ShippingOption(str, Enum):
    STANDARD = "standard"
    EXPRESS = "express"


class Order(Base, table=True):
    """Placed order.

    Table: orders
    """

    __tablename__ = "orders"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True, ondelete="SET NULL")
    status: str = Field(default=OrderStatus.PENDING.value, max_length=20, index=True)

    subtotal: Decimal = MoneyField(nullable=False)
    shipping_cost: Decimal = MoneyField(default=Decimal("0.00"))
    total: Decimal = MoneyField(nullable=False)

    shipping_option: str = Field(default=ShippingOption.STANDARD.value, max_length=20)
    payment_method: str = Field(max_length=40)
    shipping_address: str = Field(description="JSON snapshot of the shipping address")
    billing_address: str = Field(description="JSON snapshot of the billing address")
    notes: Optional[str] = Field(default=None)

    created_at: datetime = TimestampField(default_factory=utc_now, index=True)
    updated_at: datetime = TimestampField(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def get_shipping_address(self) -> Dict[str, Any]:
        return json.loads(self.shipping_address)

    def set_shipping_address(self, value: Dict[str, Any]) -> None:
        self.shipping_address = json.dumps(value)

    def get_billing_address(self) -> Dict[str, Any]:
        return json.loads(self.billing_address)

    def set_billing_address(self, value: Dict[str, Any]) -> None:
        self.billing_address = json.dumps(value)

    def __repr__(self) -> str:
        return f"Order(id={self.id}, user_id={self.user_id}, status={self.status}, total={self.total})"


class OrderItem(Base, table=True):
    """Order line, a snapshot of a cart item at checkout.

    Table: order_items
    """

    __tablename__ = "order_items"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.id", index=True, ondelete="CASCADE")
    product_id: Optional[int] = Field(default=None, index=True)
    product_name: str = Field(max_length=160)
    unit_price: Decimal = MoneyField(nullable=False)
    quantity: int = Field(default=1)
    image: Optional[str] = Field(default=None)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class OrderStatusHistory(Base, table=True):
    """Status transition of an order.

    Table: order_status_history
    """

    __tablename__ = "order_status_history"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.id", index=True, ondelete="CASCADE")
    status: str = Field(max_length=20)
    comment: Optional[str] = Field(default=None)
    changed_by: Optional[int] = Field(default=None)
    created_at: datetime = TimestampField(default_factory=utc_now)
