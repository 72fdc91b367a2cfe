"""Unit tests for password hashing and access tokens."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from chezflora.core.errors import AuthenticationError
from chezflora.core.security import create_access_token, decode_access_token, hash_password, verify_password
from chezflora.server.core.config import settings


class TestPasswordHashing:
    def test_hash_is_not_plaintext_and_verifies(self):
        hashed = hash_password("00000000", rounds=4)
        assert hashed != "00000000"
        assert hashed.startswith("$2")
        assert verify_password("00000000", hashed)

    def test_wrong_password_is_rejected(self):
        hashed = hash_password("correct horse", rounds=4)
        assert not verify_password("battery staple", hashed)

    def test_same_password_gets_different_salts(self):
        assert hash_password("password123", rounds=4) != hash_password("password123", rounds=4)

    @pytest.mark.parametrize("stored", ["", "not-a-bcrypt-hash"])
    def test_malformed_hash_never_verifies(self, stored):
        assert verify_password("password123", stored) is False


class TestAccessTokens:
    def test_round_trip_claims(self):
        token = create_access_token(42, "admin")
        claims = decode_access_token(token)
        assert claims["sub"] == 42
        assert claims["role"] == "admin"
        assert "exp" in claims

    def test_expired_token(self):
        token = create_access_token(1, "client", expires_minutes=-1)
        with pytest.raises(AuthenticationError, match="Token has expired"):
            decode_access_token(token)

    def test_tampered_token(self):
        header, payload, signature = create_access_token(1, "client").split(".")
        signature = ("A" if signature[0] != "A" else "B") + signature[1:]
        with pytest.raises(AuthenticationError, match="Invalid authentication token"):
            decode_access_token(f"{header}.{payload}.{signature}")

    def test_token_signed_with_another_secret(self):
        forged = jwt.encode(
            {"sub": "1", "role": "superadmin", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            "another-secret",
            algorithm=settings.security.jwt_algorithm,
        )
        with pytest.raises(AuthenticationError):
            decode_access_token(forged)

    def test_non_numeric_subject(self):
        token = jwt.encode(
            {"sub": "abc", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            settings.security.jwt_secret,
            algorithm=settings.security.jwt_algorithm,
        )
        with pytest.raises(AuthenticationError):
            decode_access_token(token)
