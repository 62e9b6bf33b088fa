"""
Client-side view reducer.

Models the state a connected client keeps (open chat's messages, chat list,
online users) and how each server event updates it. Events carry full
payloads, so applying them never requires a follow-up fetch.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

from app.core.config import DEFAULT_IMAGE_PLACEHOLDER
from app.models.enums import PresenceStatus, ServerEvent


@dataclass(frozen=True)
class ChatViewState:
    open_chat_id: Optional[str] = None
    messages: tuple[dict[str, Any], ...] = ()
    chats: tuple[dict[str, Any], ...] = ()
    online_users: tuple[str, ...] = ()


def _chat_of(message: dict[str, Any]) -> Optional[str]:
    chat = message.get("chat")
    if isinstance(chat, dict):
        chat = chat.get("_id")
    return str(chat) if chat is not None else None


def _apply_new_message(state: ChatViewState, message: dict[str, Any]) -> ChatViewState:
    if state.open_chat_id is None or _chat_of(message) != state.open_chat_id:
        return state
    if any(m.get("_id") == message.get("_id") for m in state.messages):
        return state
    return replace(state, messages=state.messages + (message,))


def _apply_last_message(
    state: ChatViewState, message: dict[str, Any], image_placeholder: str
) -> ChatViewState:
    chat_id = _chat_of(message)
    target = next((c for c in state.chats if c.get("_id") == chat_id), None)
    if target is None:
        return state
    content = message.get("content")
    if not content:
        if message.get("imageUrl"):
            content = image_placeholder
        else:
            content = (target.get("lastMessage") or {}).get("content")
    updated = {
        **target,
        "lastMessage": {
            "content": content,
            "timestamp": message.get("timestamp"),
        },
    }
    rest = tuple(c for c in state.chats if c.get("_id") != chat_id)
    return replace(state, chats=(updated,) + rest)


def _apply_status(state: ChatViewState, payload: dict[str, Any]) -> ChatViewState:
    user_id = payload.get("userId")
    status = payload.get("status")
    if status == PresenceStatus.ONLINE.value and user_id not in state.online_users:
        return replace(state, online_users=state.online_users + (user_id,))
    if status == PresenceStatus.OFFLINE.value:
        return replace(state, online_users=tuple(u for u in state.online_users if u != user_id))
    return state


def apply_event(
    state: ChatViewState,
    event: str,
    data: Any,
    image_placeholder: str = DEFAULT_IMAGE_PLACEHOLDER,
) -> ChatViewState:
    """
    Return the state after applying one server event. Unknown events are ignored.

    ``image_placeholder`` is the chat-list preview for image-only messages and
    should match the server's MESSAGE_IMAGE_PLACEHOLDER.
    """
    try:
        kind = ServerEvent(event)
    except ValueError:
        return state

    if kind == ServerEvent.NEW_MESSAGE:
        return _apply_new_message(state, data)
    if kind == ServerEvent.MESSAGE_UPDATED:
        return replace(
            state,
            messages=tuple(
                {**m, "content": data.get("content")} if m.get("_id") == data.get("_id") else m
                for m in state.messages
            ),
        )
    if kind == ServerEvent.MESSAGE_DELETED:
        return replace(state, messages=tuple(m for m in state.messages if m.get("_id") != data))
    if kind == ServerEvent.CHAT_LAST_MESSAGE_UPDATE:
        return _apply_last_message(state, data, image_placeholder)
    if kind == ServerEvent.NEW_CHAT_CREATED:
        if any(c.get("_id") == data.get("_id") for c in state.chats):
            return state
        return replace(state, chats=(data,) + state.chats)
    if kind == ServerEvent.CHAT_DELETED:
        open_chat_id = None if state.open_chat_id == data else state.open_chat_id
        messages = () if open_chat_id is None else state.messages
        return replace(
            state,
            open_chat_id=open_chat_id,
            messages=messages,
            chats=tuple(c for c in state.chats if c.get("_id") != data),
        )
    if kind == ServerEvent.ONLINE_USERS:
        return replace(state, online_users=tuple(dict.fromkeys(data)))
    if kind == ServerEvent.USER_STATUS_CHANGE:
        return _apply_status(state, data)
    return state
