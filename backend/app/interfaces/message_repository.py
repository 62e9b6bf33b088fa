"""
Message repository interface.

Defines the contract for message persistence.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from app.models.message import Message, MessageCreate


class IMessageRepository(ABC):
    """Abstract interface for message persistence."""

    @abstractmethod
    async def create(self, sender_id: str, data: MessageCreate) -> Message:
        """Create a message in ``data.chat_id`` authored by ``sender_id``."""
        pass

    @abstractmethod
    async def get(self, message_id: UUID) -> Optional[Message]:
        """Get a message by ID."""
        pass

    @abstractmethod
    async def list_by_chat(
        self, chat_id: UUID, limit: int = 500, offset: int = 0
    ) -> list[Message]:
        """
        List the newest ``limit`` messages of a chat (skipping the newest
        ``offset``), returned oldest first.
        """
        pass

    @abstractmethod
    async def update_content(self, message_id: UUID, content: str) -> Message:
        """
        Replace a message's content.

        Raises:
            NotFoundError: If the message does not exist
        """
        pass

    @abstractmethod
    async def delete(self, message_id: UUID) -> bool:
        """Delete a message. Returns False if it did not exist."""
        pass

    @abstractmethod
    async def delete_by_chat(self, chat_id: UUID) -> int:
        """Delete all messages of a chat. Returns count deleted."""
        pass
