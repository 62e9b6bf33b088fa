"""
Token helpers for local authentication.

Credential checks live outside this service; tokens only carry an
already-verified identity.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import jwt

from app.core.config import Settings

_ALGORITHM = "HS256"


def create_access_token(
    user_id: str,
    settings: Settings,
    expires_minutes: int | None = None,
    email: Optional[str] = None,
    display_name: Optional[str] = None,
) -> str:
    """Create a signed JWT for a user."""
    now = datetime.now(timezone.utc)
    expires = now + timedelta(minutes=expires_minutes or settings.LOCAL_JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": user_id,
        "iat": int(now.timestamp()),
        "exp": int(expires.timestamp()),
    }
    if email:
        payload["email"] = email
    if display_name:
        payload["name"] = display_name
    if settings.LOCAL_JWT_ISSUER:
        payload["iss"] = settings.LOCAL_JWT_ISSUER
    return jwt.encode(payload, settings.LOCAL_JWT_SECRET, algorithm=_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> dict[str, Any]:
    """Decode and verify a JWT. Raises jose.JWTError on failure."""
    options = {"verify_iss": bool(settings.LOCAL_JWT_ISSUER)}
    return jwt.decode(
        token,
        settings.LOCAL_JWT_SECRET,
        algorithms=[_ALGORITHM],
        issuer=settings.LOCAL_JWT_ISSUER or None,
        options=options,
    )
