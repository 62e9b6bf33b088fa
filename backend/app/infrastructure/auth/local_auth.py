"""
Local JWT authentication provider.
"""

from __future__ import annotations

from typing import Optional

from jose import JWTError

from app.core.config import Settings
from app.core.security import decode_access_token
from app.interfaces.auth_provider import IAuthProvider, User


class LocalAuthProvider(IAuthProvider):
    """Local auth provider with HMAC JWT validation."""

    def __init__(self, settings: Settings):
        if not settings.LOCAL_JWT_SECRET:
            raise ValueError("LOCAL_JWT_SECRET must be set for local auth")
        self._settings = settings

    async def verify_token(self, token: str) -> User:
        claims = decode_access_token(token, self._settings)
        subject = claims.get("sub")
        if not subject:
            raise JWTError("Missing subject")
        return User(
            id=str(subject),
            email=claims.get("email"),
            display_name=claims.get("name"),
        )

    async def get_user(self, user_id: str) -> Optional[User]:
        # Identity lives in the token; there is no user table to consult.
        return None

    def is_enabled(self) -> bool:
        return True
