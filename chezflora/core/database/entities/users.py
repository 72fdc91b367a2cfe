"""
User account entity models.

This module contains the database entities for storefront accounts and the
admin audit trail. Accounts carry a role (client, admin, superadmin) and an
account status (active, suspended, locked).
"""

from __future__ import annotations

import json
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from sqlmodel import Field

from chezflora.core.utils import utc_now

from ..base import Base, TimestampField


class UserRole(str, Enum):
    """Account roles, from least to most privileged."""

    CLIENT = "client"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class UserStatus(str, Enum):
    """Account status; only active accounts may authenticate."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    LOCKED = "locked"


class User(Base, table=True):
    """Storefront account.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True, description="Normalized (lowercase) email")
    password_hash: str = Field(max_length=255)
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    role: str = Field(default=UserRole.CLIENT.value, max_length=20, index=True)
    status: str = Field(default=UserStatus.ACTIVE.value, max_length=20, index=True)

    created_at: datetime = TimestampField(default_factory=utc_now)
    updated_at: datetime = TimestampField(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})
    last_login_at: Optional[datetime] = TimestampField(default=None)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def has_role(self, required: str) -> bool:
        """Superadmin satisfies every role; otherwise roles must match."""
        if self.role == UserRole.SUPERADMIN.value:
            return True
        return self.role == required

    @property
    def is_admin(self) -> bool:
        return self.role in (UserRole.ADMIN.value, UserRole.SUPERADMIN.value)

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.role})"


class AuditLog(Base, table=True):
    """Record of an administrative mutation.

    Table: audit_logs
    """

    __tablename__ = "audit_logs"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    actor_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True, ondelete="SET NULL")
    action: str = Field(max_length=64, index=True)
    target_type: str = Field(max_length=64)
    target_id: Optional[int] = Field(default=None)
    details: Optional[str] = Field(default=None, description="JSON-encoded details")
    timestamp: datetime = TimestampField(default_factory=utc_now, index=True)

    def get_details(self) -> Dict[str, Any]:
        if not self.details:
            return {}
        return json.loads(self.details)

    def set_details(self, value: Optional[Dict[str, Any]]) -> None:
        self.details = json.dumps(value, default=str) if value else None
