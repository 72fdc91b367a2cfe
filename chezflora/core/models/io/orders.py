"""
Order I/O models.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from chezflora.core.database.entities.orders import OrderStatus, ShippingOption


class CheckoutRequest(BaseModel):
    shipping_address_id: int
    billing_address_id: int
    shipping_option: ShippingOption = ShippingOption.STANDARD
    payment_method: str = Field(min_length=1, max_length=40, description="Recorded only, never charged")
    notes: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    comment: Optional[str] = None


class OrderCancel(BaseModel):
    reason: Optional[str] = None


class OrderItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: Optional[int] = None
    product_name: str
    unit_price: Decimal
    quantity: int
    image: Optional[str] = None
    line_total: Decimal


class StatusHistoryRead(BaseModel):
    """One status transition of an order or a quote."""

    model_config = ConfigDict(from_attributes=True)

    status: str
    comment: Optional[str] = None
    changed_by: Optional[int] = None
    created_at: datetime


class OrderRead(BaseModel):
    id: int
    user_id: Optional[int] = None
    status: OrderStatus
    subtotal: Decimal
    shipping_cost: Decimal
    total: Decimal
    shipping_option: ShippingOption
    payment_method: str
    shipping_address: Dict[str, Any]
    billing_address: Dict[str, Any]
    notes: Optional[str] = None
    items: List[OrderItemRead] = Field(default_factory=list)
    history: List[StatusHistoryRead] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
