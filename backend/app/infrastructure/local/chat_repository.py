"""
SQLite implementation of Chat repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import func, select

from app.core.exceptions import NotFoundError
from app.infrastructure.local.database import (
    ChatMemberORM,
    ChatORM,
    as_utc,
    get_session_factory,
    utcnow,
)
from app.interfaces.chat_repository import IChatRepository
from app.models.chat import Chat, ChatCreate, ChatUpdate, LastMessage


class SqliteChatRepository(IChatRepository):
    """SQLite implementation of chat repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: ChatORM) -> Chat:
        """Convert ORM object to Pydantic model."""
        last_message = None
        if orm.last_message_at is not None:
            last_message = LastMessage(
                content=orm.last_message_content or "",
                timestamp=as_utc(orm.last_message_at),
            )
        members = sorted(orm.members, key=lambda m: m.position)
        return Chat(
            id=UUID(orm.id),
            name=orm.name,
            is_group=bool(orm.is_group),
            members=[m.user_id for m in members],
            group_image_url=orm.group_image_url,
            last_message=last_message,
            created_at=as_utc(orm.created_at),
            updated_at=as_utc(orm.updated_at),
        )

    async def _get_orm(self, session, chat_id: UUID) -> Optional[ChatORM]:
        result = await session.execute(select(ChatORM).where(ChatORM.id == str(chat_id)))
        return result.scalar_one_or_none()

    async def create(self, data: ChatCreate, members: list[str]) -> Chat:
        """Create a new chat."""
        now = utcnow()
        chat_id = str(uuid4())
        async with self._session_factory() as session:
            orm = ChatORM(
                id=chat_id,
                name=data.name,
                is_group=data.is_group,
                group_image_url=data.group_image_url,
                created_at=now,
                updated_at=now,
                members=[
                    ChatMemberORM(chat_id=chat_id, user_id=user_id, position=index)
                    for index, user_id in enumerate(members)
                ],
            )
            session.add(orm)
            await session.commit()
            return self._orm_to_model(orm)

    async def get(self, chat_id: UUID) -> Optional[Chat]:
        """Get a chat by ID."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, chat_id)
            return self._orm_to_model(orm) if orm else None

    async def list_for_member(self, user_id: str) -> list[Chat]:
        """List chats the user belongs to, most recently active first."""
        async with self._session_factory() as session:
            member_chats = select(ChatMemberORM.chat_id).where(ChatMemberORM.user_id == user_id)
            query = (
                select(ChatORM)
                .where(ChatORM.id.in_(member_chats))
                .order_by(func.coalesce(ChatORM.last_message_at, ChatORM.created_at).desc())
            )
            result = await session.execute(query)
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def update(self, chat_id: UUID, update: ChatUpdate) -> Chat:
        """Update a chat's name and/or member list."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, chat_id)
            if not orm:
                raise NotFoundError(f"Chat {chat_id} not found")

            if update.name:
                orm.name = update.name

            if update.members is not None:
                # Keep surviving rows so their primary keys are not re-inserted
                existing = {m.user_id: m for m in orm.members}
                kept: list[ChatMemberORM] = []
                for index, user_id in enumerate(dict.fromkeys(update.members)):
                    row = existing.pop(user_id, None)
                    if row is None:
                        row = ChatMemberORM(chat_id=orm.id, user_id=user_id)
                    row.position = index
                    kept.append(row)
                orm.members = kept

            orm.updated_at = utcnow()
            await session.commit()
            return self._orm_to_model(orm)

    async def set_last_message(
        self, chat_id: UUID, content: str, timestamp: datetime
    ) -> Optional[Chat]:
        """Refresh the denormalized last message preview."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, chat_id)
            if not orm:
                return None
            orm.last_message_content = content
            orm.last_message_at = timestamp
            orm.updated_at = utcnow()
            await session.commit()
            return self._orm_to_model(orm)

    async def delete(self, chat_id: UUID) -> bool:
        """Delete a chat and its member rows."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, chat_id)
            if not orm:
                return False
            await session.delete(orm)
            await session.commit()
            return True
