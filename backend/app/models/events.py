"""
Realtime wire protocol.

Domain events produced by REST mutations and presence transitions, and the
JSON envelopes they travel in. Every frame on the socket is
``{"event": <name>, "data": <payload>}``.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.chat import Chat
from app.models.enums import DeliveryScope, PresenceStatus, ServerEvent
from app.models.message import Message


# ===========================================
# Envelopes
# ===========================================


class InboundFrame(BaseModel):
    """Client -> Server frame."""

    event: str
    data: Any = None


class OutboundFrame(BaseModel):
    """Server -> Client frame."""

    event: ServerEvent
    data: Any = None

    def to_json(self) -> str:
        return self.model_dump_json()


# ===========================================
# Inbound payloads
# ===========================================


class SendMessagePayload(BaseModel):
    """Payload of the client sendMessage mirror."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    chat_id: str = Field(..., alias="chatId")
    message: dict[str, Any] = Field(default_factory=dict)


class ChatScopedPayload(BaseModel):
    """Payload of the updateMessage / deleteMessage mirrors."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    chat_id: str = Field(..., alias="chatId")


# ===========================================
# Domain events
# ===========================================


class NewMessage(BaseModel):
    kind: Literal["new_message"] = "new_message"
    message: Message

    @property
    def chat_id(self) -> UUID:
        return self.message.chat_id

    @property
    def scope(self) -> DeliveryScope:
        return DeliveryScope.ROOM

    def to_frame(self) -> OutboundFrame:
        return OutboundFrame(
            event=ServerEvent.NEW_MESSAGE,
            data=self.message.model_dump(mode="json", by_alias=True),
        )


class MessageUpdated(BaseModel):
    kind: Literal["message_updated"] = "message_updated"
    chat_id: UUID
    message_id: UUID
    content: str

    @property
    def scope(self) -> DeliveryScope:
        return DeliveryScope.ROOM

    def to_frame(self) -> OutboundFrame:
        return OutboundFrame(
            event=ServerEvent.MESSAGE_UPDATED,
            data={"_id": str(self.message_id), "content": self.content},
        )


class MessageDeleted(BaseModel):
    kind: Literal["message_deleted"] = "message_deleted"
    chat_id: UUID
    message_id: UUID

    @property
    def scope(self) -> DeliveryScope:
        return DeliveryScope.ROOM

    def to_frame(self) -> OutboundFrame:
        return OutboundFrame(event=ServerEvent.MESSAGE_DELETED, data=str(self.message_id))


class ChatCreated(BaseModel):
    """A chat became visible to ``recipients`` (new chat, or members added)."""

    kind: Literal["chat_created"] = "chat_created"
    chat: Chat
    recipients: list[str] = Field(default_factory=list)

    @property
    def chat_id(self) -> UUID:
        return self.chat.id

    @property
    def scope(self) -> DeliveryScope:
        return DeliveryScope.USERS

    def to_frame(self) -> OutboundFrame:
        return OutboundFrame(
            event=ServerEvent.NEW_CHAT_CREATED,
            data=self.chat.model_dump(mode="json", by_alias=True),
        )


class ChatDeleted(BaseModel):
    kind: Literal["chat_deleted"] = "chat_deleted"
    chat_id: UUID

    @property
    def scope(self) -> DeliveryScope:
        return DeliveryScope.BROADCAST

    def to_frame(self) -> OutboundFrame:
        return OutboundFrame(event=ServerEvent.CHAT_DELETED, data=str(self.chat_id))


class LastMessageUpdate(BaseModel):
    kind: Literal["last_message_update"] = "last_message_update"
    message: Message

    @property
    def chat_id(self) -> UUID:
        return self.message.chat_id

    @property
    def scope(self) -> DeliveryScope:
        return DeliveryScope.BROADCAST

    def to_frame(self) -> OutboundFrame:
        return OutboundFrame(
            event=ServerEvent.CHAT_LAST_MESSAGE_UPDATE,
            data=self.message.model_dump(mode="json", by_alias=True),
        )


class PresenceChanged(BaseModel):
    kind: Literal["presence_changed"] = "presence_changed"
    user_id: str
    status: PresenceStatus

    @property
    def scope(self) -> DeliveryScope:
        return DeliveryScope.BROADCAST

    def to_frame(self) -> OutboundFrame:
        return OutboundFrame(
            event=ServerEvent.USER_STATUS_CHANGE,
            data={"userId": self.user_id, "status": self.status.value},
        )


ChatEvent = Annotated[
    Union[
        NewMessage,
        MessageUpdated,
        MessageDeleted,
        ChatCreated,
        ChatDeleted,
        LastMessageUpdate,
        PresenceChanged,
    ],
    Field(discriminator="kind"),
]


def online_users_frame(user_ids: list[str]) -> OutboundFrame:
    """Snapshot reply to getOnlineUsers (and the greeting after register)."""
    return OutboundFrame(event=ServerEvent.ONLINE_USERS, data=list(user_ids))
