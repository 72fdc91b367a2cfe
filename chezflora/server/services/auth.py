"""
Authentication service.

Handles registration, login, token verification and the self-service
profile operations. A successful registration or login also folds the
visitor's guest cart into the account cart.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database.entities.users import User, UserRole, UserStatus
from chezflora.core.database.repositories import UserRepository
from chezflora.core.errors import (
    AuthenticationError,
    ConflictError,
    InvalidOperationError,
    PermissionDeniedError,
)
from chezflora.core.models.io import ProfileUpdate, RegisterRequest
from chezflora.core.monitoring import log_business_event
from chezflora.core.security import create_access_token, decode_access_token, hash_password, verify_password
from chezflora.core.utils import normalize_email, utc_now

from .cart import CartService

logger = logging.getLogger(__name__)


def ensure_active(user: User) -> None:
    """Reject accounts that are suspended or locked."""
    if user.status != UserStatus.ACTIVE.value:
        raise PermissionDeniedError(f"Account is {user.status}")


class AuthService:
    """Service for account authentication and self-service profile management."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)

    async def register(self, data: RegisterRequest, guest_token: Optional[str] = None) -> Tuple[User, str]:
        """
        Create a client account and sign it in.

        Args:
            data: Registration payload; the email is already normalized
            guest_token: Guest cart to merge into the new account's cart

        Returns:
            The new user and an access token

        Raises:
            ConflictError: If the email is already registered
        """
        if await self.users.get_by_email(data.email):
            raise ConflictError("An account with this email already exists")

        user = await self.users.create(
            User(
                email=data.email,
                password_hash=hash_password(data.password),
                first_name=data.first_name.strip(),
                last_name=data.last_name.strip(),
                role=UserRole.CLIENT.value,
                status=UserStatus.ACTIVE.value,
                last_login_at=utc_now(),
            )
        )
        await self.session.commit()
        logger.info(f"Registered user {user.id} ({user.email})")
        log_business_event("user.registered", user_id=user.id)

        if guest_token:
            await CartService(self.session).merge_guest_cart(user, guest_token)
        return user, create_access_token(user.id, user.role)

    async def login(self, email: str, password: str, guest_token: Optional[str] = None) -> Tuple[User, str]:
        """
        Verify credentials and issue an access token.

        Raises:
            AuthenticationError: Unknown email or wrong password
            PermissionDeniedError: Suspended or locked account
        """
        user = await self.users.get_by_email(normalize_email(email))
        if user is None:
            raise AuthenticationError("No account found with this email")
        if not verify_password(password, user.password_hash):
            logger.info(f"Failed login for user {user.id}: incorrect password")
            raise AuthenticationError("Incorrect password")
        ensure_active(user)

        user.last_login_at = utc_now()
        self.session.add(user)
        await self.session.commit()
        logger.info(f"User {user.id} logged in")

        if guest_token:
            await CartService(self.session).merge_guest_cart(user, guest_token)
        return user, create_access_token(user.id, user.role)

    async def authenticate_token(self, token: str) -> User:
        """Resolve a bearer token to an active user."""
        claims = decode_access_token(token)
        user = await self.users.get_by_id(claims["sub"])
        if user is None:
            raise AuthenticationError("User no longer exists")
        ensure_active(user)
        return user

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        email = fields.pop("email", None)
        if email and email != user.email:
            existing = await self.users.get_by_email(email)
            if existing and existing.id != user.id:
                raise ConflictError("An account with this email already exists")
            user.email = email
        for key, value in fields.items():
            setattr(user, key, value.strip())
        user = await self.users.update(user)
        await self.session.commit()
        return user

    async def change_password(self, user: User, current_password: str, new_password: str) -> None:
        if not verify_password(current_password, user.password_hash):
            raise InvalidOperationError("Current password is incorrect")
        user.password_hash = hash_password(new_password)
        await self.users.update(user)
        await self.session.commit()
        logger.info(f"User {user.id} changed their password")
