"""
Mock authentication provider for local development and tests.

The bearer token is the caller's user id, so two terminals can act as
``alice`` and ``bob`` without issuing JWTs.
"""

from typing import Iterable, Optional

from app.core.exceptions import AuthenticationError
from app.interfaces.auth_provider import IAuthProvider, User

DEFAULT_USERS = (
    User(id="dev_user", email="dev@example.com", display_name="Developer"),
    User(id="test_user", email="test@example.com", display_name="Test User"),
)


class MockAuthProvider(IAuthProvider):
    """Identity-from-token provider. Unknown ids are accepted as new users."""

    def __init__(self, enabled: bool = False, users: Iterable[User] = DEFAULT_USERS):
        """
        Args:
            enabled: Whether requests must carry a bearer token at all
            users: Users with a known profile (email / display name)
        """
        self._enabled = enabled
        self._known = {user.id: user for user in users}

    async def verify_token(self, token: str) -> User:
        user_id = token.strip()
        if not user_id:
            raise AuthenticationError("Empty token")
        known = self._known.get(user_id)
        if known is not None:
            return known
        email = user_id if "@" in user_id else f"{user_id}@example.com"
        return User(id=user_id, email=email, display_name=user_id)

    async def get_user(self, user_id: str) -> Optional[User]:
        return self._known.get(user_id)

    def is_enabled(self) -> bool:
        return self._enabled
