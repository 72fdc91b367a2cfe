"""
Request dependencies.

Resolves the bearer token into the current user and enforces role gates.
Role checks follow the account hierarchy: a superadmin satisfies every role,
an admin satisfies ``admin``, anyone else must hold the exact role.
"""

from typing import Annotated, Callable, Optional

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database import get_session
from chezflora.core.database.entities.users import User, UserRole
from chezflora.core.errors import AuthenticationError, PermissionDeniedError
from chezflora.server.core.constant import GUEST_CART_HEADER

from .auth import AuthService

bearer_scheme = HTTPBearer(auto_error=False, description="Access token from /auth/login")

SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def get_optional_user(
    session: SessionDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[User]:
    """The signed-in user, or None for anonymous requests."""
    if credentials is None:
        return None
    return await AuthService(session).authenticate_token(credentials.credentials)


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise AuthenticationError("Not authenticated")
    return user


def require_roles(*roles: str) -> Callable:
    """Dependency factory admitting users that satisfy any of ``roles``."""

    async def checker(user: User = Depends(get_current_user)) -> User:
        if not any(user.has_role(role) for role in roles):
            raise PermissionDeniedError("You do not have permission to perform this action")
        return user

    return checker


async def get_guest_token(
    x_guest_cart: Optional[str] = Header(default=None, alias=GUEST_CART_HEADER),
) -> Optional[str]:
    return x_guest_cart.strip() if x_guest_cart and x_guest_cart.strip() else None


OptionalUserDep = Annotated[Optional[User], Depends(get_optional_user)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]
AdminDep = Annotated[User, Depends(require_roles(UserRole.ADMIN.value))]
GuestTokenDep = Annotated[Optional[str], Depends(get_guest_token)]
