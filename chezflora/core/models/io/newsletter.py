"""
Newsletter I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

from .users import Email


class SubscriptionRequest(BaseModel):
    email: Email


class SubscriptionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    email: str
    subscribed_at: datetime


class SubscribeResponse(BaseModel):
    status: Literal["subscribed", "already_subscribed"]
    email: str
    subscribed_at: datetime


class SubscriptionStatus(BaseModel):
    email: str
    subscribed: bool
