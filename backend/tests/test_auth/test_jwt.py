"""Unit tests for JWT token creation, decoding, and validation."""

from datetime import timedelta

import pytest
from jose import JWTError

from estatehub.auth.jwt import (
    ROLE_ADMIN,
    ROLE_USER,
    create_access_token,
    create_refresh_token,
    create_token_pair,
    decode_token,
)


class TestCreateAccessToken:
    """Test access token creation."""

    def test_contains_type_access(self):
        payload = decode_token(create_access_token({"sub": "account-123", "role": ROLE_USER}))
        assert payload["type"] == "access"

    def test_contains_sub_and_role(self):
        payload = decode_token(create_access_token({"sub": "account-abc", "role": ROLE_ADMIN}))
        assert payload["sub"] == "account-abc"
        assert payload["role"] == ROLE_ADMIN

    def test_contains_iat_and_exp(self):
        payload = decode_token(create_access_token({"sub": "account-123", "role": ROLE_USER}))
        assert "iat" in payload
        assert "exp" in payload


class TestCreateRefreshToken:
    def test_contains_type_refresh(self):
        payload = decode_token(create_refresh_token({"sub": "account-123", "role": ROLE_USER}))
        assert payload["type"] == "refresh"


class TestDecodeToken:
    def test_expired_token(self):
        token = create_access_token({"sub": "account-123"}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(JWTError):
            decode_token(token)

    def test_garbage_token(self):
        with pytest.raises(JWTError):
            decode_token("not.a.jwt")


class TestCreateTokenPair:
    def test_pair_shares_subject_and_role(self):
        tokens = create_token_pair("account-1", ROLE_ADMIN)
        access = decode_token(tokens["access_token"])
        refresh = decode_token(tokens["refresh_token"])
        assert tokens["token_type"] == "bearer"
        assert access["sub"] == refresh["sub"] == "account-1"
        assert access["role"] == refresh["role"] == ROLE_ADMIN

    def test_unknown_role(self):
        with pytest.raises(ValueError, match="Unknown role"):
            create_token_pair("account-1", "superuser")
