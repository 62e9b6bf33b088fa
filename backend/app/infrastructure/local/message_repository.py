"""
SQLite implementation of Message repository.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import NotFoundError
from app.infrastructure.local.database import MessageORM, as_utc, get_session_factory, utcnow
from app.interfaces.message_repository import IMessageRepository
from app.models.message import Message, MessageCreate


class SqliteMessageRepository(IMessageRepository):
    """SQLite implementation of message repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: MessageORM) -> Message:
        """Convert ORM object to Pydantic model."""
        return Message(
            id=UUID(orm.id),
            chat_id=UUID(orm.chat_id),
            sender_id=orm.sender_id,
            content=orm.content,
            image_url=orm.image_url,
            timestamp=as_utc(orm.timestamp),
            updated_at=as_utc(orm.updated_at),
        )

    async def create(self, sender_id: str, data: MessageCreate) -> Message:
        """Create a message."""
        async with self._session_factory() as session:
            orm = MessageORM(
                id=str(uuid4()),
                chat_id=str(data.chat_id),
                sender_id=sender_id,
                content=data.content,
                image_url=data.image_url,
                timestamp=utcnow(),
            )
            session.add(orm)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise NotFoundError(f"Chat {data.chat_id} not found")
            return self._orm_to_model(orm)

    async def get(self, message_id: UUID) -> Optional[Message]:
        """Get a message by ID."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MessageORM).where(MessageORM.id == str(message_id))
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def list_by_chat(
        self, chat_id: UUID, limit: int = 500, offset: int = 0
    ) -> list[Message]:
        """
        List a page of a chat's history, oldest first.

        Pages are counted from the newest message: offset=0 is always the
        latest ``limit`` messages, larger offsets reach further back.
        """
        async with self._session_factory() as session:
            query = (
                select(MessageORM)
                .where(MessageORM.chat_id == str(chat_id))
                .order_by(MessageORM.timestamp.desc())
                .limit(limit)
                .offset(offset)
            )
            result = await session.execute(query)
            newest_first = [self._orm_to_model(orm) for orm in result.scalars().all()]
            return newest_first[::-1]

    async def update_content(self, message_id: UUID, content: str) -> Message:
        """Replace a message's content."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MessageORM).where(MessageORM.id == str(message_id))
            )
            orm = result.scalar_one_or_none()
            if not orm:
                raise NotFoundError(f"Message {message_id} not found")
            orm.content = content
            orm.updated_at = utcnow()
            await session.commit()
            return self._orm_to_model(orm)

    async def delete(self, message_id: UUID) -> bool:
        """Delete a message."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MessageORM).where(MessageORM.id == str(message_id))
            )
            orm = result.scalar_one_or_none()
            if not orm:
                return False
            await session.delete(orm)
            await session.commit()
            return True

    async def delete_by_chat(self, chat_id: UUID) -> int:
        """Delete all messages of a chat."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MessageORM).where(MessageORM.chat_id == str(chat_id))
            )
            orms = result.scalars().all()
            count = len(orms)
            for orm in orms:
                await session.delete(orm)
            if count > 0:
                await session.commit()
            return count
