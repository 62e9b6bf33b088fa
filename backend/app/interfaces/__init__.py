"""Abstract interfaces for infrastructure abstraction."""

from app.interfaces.auth_provider import IAuthProvider, User
from app.interfaces.chat_repository import IChatRepository
from app.interfaces.message_repository import IMessageRepository

__all__ = [
    "IAuthProvider",
    "IChatRepository",
    "IMessageRepository",
    "User",
]
