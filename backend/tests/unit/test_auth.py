"""
Unit tests for token verification and the current-user dependency.
"""

import pytest
from fastapi import HTTPException
from jose import JWTError

from app.api.deps import get_current_user
from app.core.config import Settings
from app.core.exceptions import AuthenticationError
from app.core.security import create_access_token
from app.infrastructure.auth.local_auth import LocalAuthProvider
from app.infrastructure.local.mock_auth import MockAuthProvider


def _settings(**overrides) -> Settings:
    values = {"AUTH_PROVIDER": "local", "LOCAL_JWT_SECRET": "unit-test-secret"}
    values.update(overrides)
    return Settings(**values)


class TestLocalAuthProvider:
    async def test_token_round_trip(self):
        settings = _settings()
        provider = LocalAuthProvider(settings)
        token = create_access_token(
            "alice", settings, email="alice@example.com", display_name="Alice"
        )

        user = await provider.verify_token(token)

        assert user.id == "alice"
        assert user.email == "alice@example.com"
        assert user.display_name == "Alice"

    async def test_wrong_secret_is_rejected(self):
        token = create_access_token("alice", _settings(LOCAL_JWT_SECRET="other"))

        with pytest.raises(JWTError):
            await LocalAuthProvider(_settings()).verify_token(token)

    async def test_wrong_issuer_is_rejected(self):
        token = create_access_token("alice", _settings(LOCAL_JWT_ISSUER="someone-else"))

        with pytest.raises(JWTError):
            await LocalAuthProvider(_settings()).verify_token(token)

    def test_secret_is_required(self):
        with pytest.raises(ValueError):
            LocalAuthProvider(_settings(LOCAL_JWT_SECRET=""))


class TestMockAuthProvider:
    async def test_token_is_user_id(self):
        user = await MockAuthProvider(enabled=True).verify_token("bob")

        assert user.id == "bob"
        assert user.email == "bob@example.com"

    async def test_known_user(self):
        user = await MockAuthProvider().verify_token("dev_user")

        assert user.display_name == "Developer"

    async def test_blank_token_is_rejected(self):
        with pytest.raises(AuthenticationError):
            await MockAuthProvider(enabled=True).verify_token("  ")


class TestGetCurrentUser:
    async def test_missing_header_is_401(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(authorization=None, auth_provider=MockAuthProvider(enabled=True))

        assert exc_info.value.status_code == 401

    async def test_wrong_scheme_is_401(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(
                authorization="Basic abc", auth_provider=MockAuthProvider(enabled=True)
            )

        assert exc_info.value.status_code == 401

    async def test_invalid_token_is_401(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(
                authorization="Bearer not-a-jwt", auth_provider=LocalAuthProvider(_settings())
            )

        assert exc_info.value.status_code == 401

    async def test_bearer_token_resolves_user(self):
        user = await get_current_user(
            authorization="Bearer carol", auth_provider=MockAuthProvider(enabled=True)
        )

        assert user.id == "carol"

    async def test_disabled_auth_falls_back_to_dev_user(self):
        user = await get_current_user(authorization=None, auth_provider=MockAuthProvider())

        assert user.id == "dev_user"
