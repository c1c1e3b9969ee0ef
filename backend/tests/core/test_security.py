"""Tests for password hashing and access token signing."""
from datetime import UTC, datetime, timedelta

import jwt
import pytest

from core.config import Settings
from core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


@pytest.fixture
def token_settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="postgresql://test",
        jwt_secret="unit-test-secret-value",
    )


class TestPasswordHashing:
    """Tests for Argon2 password hashing."""

    def test__hash_password__is_not_plaintext(self) -> None:
        hashed = hash_password("123456")
        assert hashed != "123456"
        assert hashed.startswith("$argon2")

    def test__hash_password__is_salted(self) -> None:
        assert hash_password("123456") != hash_password("123456")

    def test__verify_password__correct(self) -> None:
        assert verify_password(hash_password("123456"), "123456") is True

    def test__verify_password__wrong(self) -> None:
        assert verify_password(hash_password("123456"), "654321") is False

    def test__verify_password__garbage_hash(self) -> None:
        assert verify_password("not-a-hash", "123456") is False


class TestAccessTokens:
    """Tests for JWT access token creation and validation."""

    def test__create_access_token__claims(self, token_settings: Settings) -> None:
        token = create_access_token(42, "moll@gmail.com", token_settings)

        payload = decode_access_token(token, token_settings)

        assert payload["sub"] == "42"
        assert payload["email"] == "moll@gmail.com"
        assert payload["exp"] - payload["iat"] == 15 * 60

    def test__decode_access_token__wrong_secret(self, token_settings: Settings) -> None:
        token = create_access_token(42, "moll@gmail.com", token_settings)
        other = token_settings.model_copy(update={"jwt_secret": "a-different-secret-value"})

        with pytest.raises(jwt.InvalidSignatureError):
            decode_access_token(token, other)

    def test__decode_access_token__expired(self, token_settings: Settings) -> None:
        expired = jwt.encode(
            {"sub": "42", "exp": datetime.now(UTC) - timedelta(minutes=1)},
            token_settings.jwt_secret,
            algorithm="HS256",
        )

        with pytest.raises(jwt.ExpiredSignatureError):
            decode_access_token(expired, token_settings)

    def test__decode_access_token__requires_sub(self, token_settings: Settings) -> None:
        token = jwt.encode(
            {"exp": datetime.now(UTC) + timedelta(minutes=1)},
            token_settings.jwt_secret,
            algorithm="HS256",
        )

        with pytest.raises(jwt.MissingRequiredClaimError):
            decode_access_token(token, token_settings)

    def test__decode_access_token__requires_exp(self, token_settings: Settings) -> None:
        token = jwt.encode({"sub": "42"}, token_settings.jwt_secret, algorithm="HS256")

        with pytest.raises(jwt.MissingRequiredClaimError):
            decode_access_token(token, token_settings)

    def test__decode_access_token__rejects_unsigned(self, token_settings: Settings) -> None:
        token = jwt.encode(
            {"sub": "42", "exp": datetime.now(UTC) + timedelta(minutes=1)},
            None,
            algorithm="none",
        )

        with pytest.raises(jwt.PyJWTError):
            decode_access_token(token, token_settings)
