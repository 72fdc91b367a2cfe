"""
Account I/O models for API requests and responses.

Covers registration and login, the self-service profile endpoints and the
admin user management endpoints. The password hash never appears in any
response model.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Annotated, Any, Dict, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from chezflora.core.database.entities.users import UserRole, UserStatus
from chezflora.core.utils import is_valid_email, normalize_email

MIN_PASSWORD_LENGTH = 8


def _check_email(value: str) -> str:
    value = normalize_email(value)
    if not is_valid_email(value):
        raise ValueError("Invalid email address")
    return value


# Trimmed, lowercased and required to contain "@"
Email = Annotated[str, AfterValidator(_check_email)]


class UserRead(BaseModel):
    """Schema for reading an account from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    first_name: str
    last_name: str
    role: UserRole
    status: UserStatus
    created_at: datetime
    updated_at: datetime
    last_login_at: Optional[datetime] = None


class RegisterRequest(BaseModel):
    email: Email = Field(description="Account email, matched case-insensitively")
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return normalize_email(value)


class TokenResponse(BaseModel):
    """Access token issued on login or registration."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Token lifetime in seconds")
    user: UserRead


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[Email] = None


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class UserCreate(BaseModel):
    """Schema for creating an account from the back-office."""

    email: Email
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    role: UserRole = UserRole.CLIENT
    status: UserStatus = UserStatus.ACTIVE


class UserUpdate(BaseModel):
    email: Optional[Email] = None
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None


class StatusChange(BaseModel):
    status: UserStatus


class RoleChange(BaseModel):
    role: UserRole


class PasswordReset(BaseModel):
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class AuditLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    actor_id: Optional[int] = None
    action: str
    target_type: str
    target_id: Optional[int] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime

    @field_validator("details", mode="before")
    @classmethod
    def _decode_details(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, str):
            return json.loads(value)
        return value
