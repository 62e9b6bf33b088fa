"""
Chat repository interface.

Defines the contract for chat persistence.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from app.models.chat import Chat, ChatCreate, ChatUpdate


class IChatRepository(ABC):
    """Abstract interface for chat persistence."""

    @abstractmethod
    async def create(self, data: ChatCreate, members: list[str]) -> Chat:
        """
        Create a new chat.

        Args:
            data: Chat fields
            members: Final, de-duplicated member list

        Returns:
            Created chat
        """
        pass

    @abstractmethod
    async def get(self, chat_id: UUID) -> Optional[Chat]:
        """Get a chat by ID."""
        pass

    @abstractmethod
    async def list_for_member(self, user_id: str) -> list[Chat]:
        """List chats the user belongs to, most recently active first."""
        pass

    @abstractmethod
    async def update(self, chat_id: UUID, update: ChatUpdate) -> Chat:
        """
        Update a chat's name and/or member list.

        Raises:
            NotFoundError: If the chat does not exist
        """
        pass

    @abstractmethod
    async def set_last_message(
        self, chat_id: UUID, content: str, timestamp: datetime
    ) -> Optional[Chat]:
        """Refresh the denormalized last message preview."""
        pass

    @abstractmethod
    async def delete(self, chat_id: UUID) -> bool:
        """Delete a chat. Returns False if it did not exist."""
        pass
