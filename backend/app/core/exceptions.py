"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class ChatRelayError(Exception):
    """Base exception for chat-relay."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(ChatRelayError):
    """Resource not found."""

    pass


class ValidationError(ChatRelayError):
    """Validation error."""

    pass


class AuthenticationError(ChatRelayError):
    """Authentication failed."""

    pass


class AuthorizationError(ChatRelayError):
    """Authorization failed."""

    pass


class ForbiddenError(AuthorizationError):
    """Forbidden operation (authorization denied)."""

    pass
