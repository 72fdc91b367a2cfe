"""
Newsletter subscription entity model.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from chezflora.core.utils import utc_now

from ..base import Base, TimestampField


class NewsletterSubscription(Base, table=True):
    """Email address subscribed to the newsletter.

    Table: newsletter_subscriptions
    """

    __tablename__ = "newsletter_subscriptions"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True)
    subscribed_at: datetime = TimestampField(default_factory=utc_now)
