"""Pydantic models (schemas) for the application."""

from app.models.enums import ClientEvent, DeliveryScope, PresenceStatus, ServerEvent
from app.models.chat import Chat, ChatCreate, ChatUpdate, LastMessage
from app.models.message import Message, MessageCreate, MessageUpdate
from app.models.events import (
    ChatCreated,
    ChatDeleted,
    ChatEvent,
    InboundFrame,
    LastMessageUpdate,
    MessageDeleted,
    MessageUpdated,
    NewMessage,
    OutboundFrame,
    PresenceChanged,
)

__all__ = [
    # Enums
    "ClientEvent",
    "DeliveryScope",
    "PresenceStatus",
    "ServerEvent",
    # Chat
    "Chat",
    "ChatCreate",
    "ChatUpdate",
    "LastMessage",
    # Message
    "Message",
    "MessageCreate",
    "MessageUpdate",
    # Events
    "ChatEvent",
    "ChatCreated",
    "ChatDeleted",
    "InboundFrame",
    "LastMessageUpdate",
    "MessageDeleted",
    "MessageUpdated",
    "NewMessage",
    "OutboundFrame",
    "PresenceChanged",
]
