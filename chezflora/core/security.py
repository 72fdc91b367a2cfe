"""
Password hashing and access tokens.

Passwords are stored as bcrypt hashes. Access tokens are HS256 JWTs carrying
the user id in ``sub``, the role in ``role`` and the expiry in ``exp``.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt
import jwt

from chezflora.core.errors import AuthenticationError
from chezflora.server.core.config import settings


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.security.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage
        return False


def create_access_token(user_id: int, role: str, expires_minutes: Optional[int] = None) -> str:
    """
    Sign an access token for a user.

    Args:
        user_id: The user's primary key, stored as the ``sub`` claim
        role: The user's role at issue time
        expires_minutes: Override of the configured lifetime

    Returns:
        The encoded JWT
    """
    lifetime = expires_minutes if expires_minutes is not None else settings.security.access_token_expire_minutes
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=lifetime),
    }
    return jwt.encode(payload, settings.security.jwt_secret, algorithm=settings.security.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify a token and return its claims.

    Raises:
        AuthenticationError: If the token is expired, tampered with or malformed
    """
    try:
        claims = jwt.decode(
            token,
            settings.security.jwt_secret,
            algorithms=[settings.security.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthenticationError("Invalid authentication token") from e

    try:
        claims["sub"] = int(claims["sub"])
    except (TypeError, ValueError) as e:
        raise AuthenticationError("Invalid authentication token") from e
    return claims
