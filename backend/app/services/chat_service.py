"""
Chat and message mutation services.

Every mutation validates and authorizes first, then writes to the store, and
only after the write has settled hands its events to the router. A failed
operation therefore never produces a partial broadcast.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from app.core.config import Settings, get_settings
from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.core.logger import setup_logger
from app.interfaces.chat_repository import IChatRepository
from app.interfaces.message_repository import IMessageRepository
from app.models.chat import Chat, ChatCreate, ChatUpdate
from app.models.events import (
    ChatCreated,
    ChatDeleted,
    LastMessageUpdate,
    MessageDeleted,
    MessageUpdated,
    NewMessage,
)
from app.models.message import Message, MessageCreate
from app.services.event_router import EventRouter

logger = setup_logger(__name__)


def normalize_members(actor_id: str, members: list[str]) -> list[str]:
    """De-duplicate members (first occurrence wins) and make sure the actor is one."""
    cleaned = [m.strip() for m in members if m and m.strip()]
    return list(dict.fromkeys([*cleaned, actor_id]))


def _check_member_count(is_group: bool, name: Optional[str], members: list[str]) -> None:
    if is_group:
        if not (name and name.strip()):
            raise ValidationError("Group chats require a name")
    elif len(members) != 2:
        raise ValidationError("One-to-one chats require exactly one other member")


async def _get_chat_for_member(
    chat_repo: IChatRepository, chat_id: UUID, user_id: str
) -> Chat:
    chat = await chat_repo.get(chat_id)
    if not chat:
        raise NotFoundError(f"Chat {chat_id} not found")
    if not chat.has_member(user_id):
        raise ForbiddenError("You are not a member of this chat")
    return chat


class ChatService:
    """Chat lifecycle: create, list, edit, delete."""

    def __init__(
        self,
        chat_repo: IChatRepository,
        message_repo: IMessageRepository,
        router: EventRouter,
    ):
        self._chat_repo = chat_repo
        self._message_repo = message_repo
        self._router = router

    async def create_chat(self, actor_id: str, data: ChatCreate) -> Chat:
        members = normalize_members(actor_id, data.members)
        _check_member_count(data.is_group, data.name, members)

        chat = await self._chat_repo.create(data, members)
        recipients = [m for m in chat.members if m != actor_id]
        self._router.route(ChatCreated(chat=chat, recipients=recipients))
        logger.info("Chat %s created by %s with %d member(s)", chat.id, actor_id, len(members))
        return chat

    async def list_chats(self, actor_id: str) -> list[Chat]:
        return await self._chat_repo.list_for_member(actor_id)

    async def update_chat(self, actor_id: str, chat_id: UUID, update: ChatUpdate) -> Chat:
        before = await _get_chat_for_member(self._chat_repo, chat_id, actor_id)
        if update.members is not None:
            members = normalize_members(actor_id, update.members)
            _check_member_count(before.is_group, update.name or before.name, members)
            update = update.model_copy(update={"members": members})

        chat = await self._chat_repo.update(chat_id, update)
        # Members added by this edit have never seen the chat
        added = [m for m in chat.members if m not in before.members]
        self._router.route(ChatCreated(chat=chat, recipients=added))
        return chat

    async def delete_chat(self, actor_id: str, chat_id: UUID) -> None:
        await _get_chat_for_member(self._chat_repo, chat_id, actor_id)
        await self._message_repo.delete_by_chat(chat_id)
        deleted = await self._chat_repo.delete(chat_id)
        if not deleted:
            raise NotFoundError(f"Chat {chat_id} not found")
        self._router.route(ChatDeleted(chat_id=chat_id))
        logger.info("Chat %s deleted by %s", chat_id, actor_id)


class MessageService:
    """Message lifecycle: send, list, edit, delete."""

    def __init__(
        self,
        chat_repo: IChatRepository,
        message_repo: IMessageRepository,
        router: EventRouter,
        settings: Optional[Settings] = None,
    ):
        self._chat_repo = chat_repo
        self._message_repo = message_repo
        self._router = router
        self._settings = settings or get_settings()

    async def send_message(self, actor_id: str, data: MessageCreate) -> Message:
        content = data.content.strip() if data.content else None
        if not content and not data.image_url:
            raise ValidationError("A message needs content or an image")
        await _get_chat_for_member(self._chat_repo, data.chat_id, actor_id)

        message = await self._message_repo.create(
            actor_id, data.model_copy(update={"content": content})
        )
        chat = await self._chat_repo.set_last_message(
            data.chat_id,
            content or self._settings.MESSAGE_IMAGE_PLACEHOLDER,
            message.timestamp,
        )
        if chat is None:
            # Chat was deleted while the message was being written
            await self._message_repo.delete(message.id)
            raise NotFoundError(f"Chat {data.chat_id} not found")
        self._router.route_all([NewMessage(message=message), LastMessageUpdate(message=message)])
        return message

    async def list_messages(
        self, actor_id: str, chat_id: UUID, limit: int = 500, offset: int = 0
    ) -> list[Message]:
        await _get_chat_for_member(self._chat_repo, chat_id, actor_id)
        return await self._message_repo.list_by_chat(chat_id, limit=limit, offset=offset)

    async def _get_own_message(self, actor_id: str, message_id: UUID, verb: str) -> Message:
        message = await self._message_repo.get(message_id)
        if not message:
            raise NotFoundError(f"Message {message_id} not found")
        if message.sender_id != actor_id:
            raise ForbiddenError(f"You can only {verb} your own messages")
        return message

    async def edit_message(self, actor_id: str, message_id: UUID, content: str) -> Message:
        await self._get_own_message(actor_id, message_id, "edit")
        message = await self._message_repo.update_content(message_id, content)
        self._router.route(
            MessageUpdated(
                chat_id=message.chat_id,
                message_id=message.id,
                content=message.content or "",
            )
        )
        return message

    async def delete_message(self, actor_id: str, message_id: UUID) -> None:
        message = await self._get_own_message(actor_id, message_id, "delete")
        deleted = await self._message_repo.delete(message_id)
        if not deleted:
            raise NotFoundError(f"Message {message_id} not found")
        self._router.route(MessageDeleted(chat_id=message.chat_id, message_id=message_id))
