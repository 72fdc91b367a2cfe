"""
Authentication Endpoints.

Registration, login and the signed-in user's own profile. Tokens are
stateless JWTs: logout only tells the client to discard its token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from chezflora.core.database import get_session
from chezflora.core.database.entities.users import User
from chezflora.core.logging_config import get_logger
from chezflora.core.models.io import (
    LoginRequest,
    PasswordChange,
    ProfileUpdate,
    RegisterRequest,
    TokenResponse,
    UserRead,
)
from chezflora.server.core.config import settings
from chezflora.server.services.auth import AuthService
from chezflora.server.services.deps import CurrentUserDep, GuestTokenDep

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


def _token_response(user: User, token: str) -> TokenResponse:
    return TokenResponse(
        access_token=token,
        expires_in=settings.security.access_token_expire_minutes * 60,
        user=UserRead.model_validate(user),
    )


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create a client account and sign it in. A guest cart sent in the X-Guest-Cart header is merged into the new account.",
    response_description="Access token and the created account.",
    responses={
        201: {"description": "Account created"},
        409: {"description": "Email already registered"},
        422: {"description": "Invalid email or password shorter than 8 characters"},
    },
)
async def register(
    payload: RegisterRequest,
    guest_token: GuestTokenDep,
    session: AsyncSession = Depends(get_session),
) -> TokenResponse:
    """
    Register a new client account.

    - **email**: Trimmed and lowercased; must be unique.
    - **password**: At least 8 characters.
    """
    user, token = await AuthService(session).register(payload, guest_token)
    return _token_response(user, token)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login",
    description="Exchange email and password for an access token. A guest cart sent in the X-Guest-Cart header is merged into the account cart.",
    response_description="Access token and the account.",
    responses={
        200: {"description": "Signed in"},
        401: {"description": "Unknown email or incorrect password"},
        403: {"description": "Account suspended or locked"},
    },
)
async def login(
    payload: LoginRequest,
    guest_token: GuestTokenDep,
    session: AsyncSession = Depends(get_session),
) -> TokenResponse:
    user, token = await AuthService(session).login(payload.email, payload.password, guest_token)
    return _token_response(user, token)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout",
    description="Tokens are stateless; the client discards its token.",
)
async def logout() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/me",
    response_model=UserRead,
    summary="Current User",
    description="Return the account the bearer token belongs to.",
    responses={401: {"description": "Missing or invalid token"}},
)
async def me(user: CurrentUserDep) -> UserRead:
    return UserRead.model_validate(user)


@router.patch(
    "/me",
    response_model=UserRead,
    summary="Update Profile",
    description="Update first name, last name or email of the signed-in account.",
    responses={409: {"description": "Email already registered"}},
)
async def update_me(
    payload: ProfileUpdate,
    user: CurrentUserDep,
    session: AsyncSession = Depends(get_session),
) -> UserRead:
    updated = await AuthService(session).update_profile(user, payload)
    return UserRead.model_validate(updated)


@router.post(
    "/me/password",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Change Password",
    description="Change the signed-in account's password; the current password must be supplied.",
    responses={400: {"description": "Current password is incorrect"}},
)
async def change_password(
    payload: PasswordChange,
    user: CurrentUserDep,
    session: AsyncSession = Depends(get_session),
) -> Response:
    await AuthService(session).change_password(user, payload.current_password, payload.new_password)
    logger.debug(f"Password changed for user {user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
