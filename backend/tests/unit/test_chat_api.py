"""
Unit tests for chat and message route handlers.

Handlers are called directly with mocked services to check how domain
errors map onto HTTP status codes.
"""

from datetime import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi import HTTPException

from app.api.chats import create_chat, delete_chat, list_chats, update_chat
from app.api.messages import delete_message, edit_message, list_messages, send_message
from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.models.chat import Chat, ChatCreate, ChatUpdate
from app.models.message import MessageCreate, MessageUpdate


def _user(user_id: str = "alice"):
    return SimpleNamespace(id=user_id)


@pytest.mark.asyncio
async def test_create_chat_validation_error_is_400() -> None:
    service = AsyncMock()
    service.create_chat.side_effect = ValidationError("Group chats require a name")

    with pytest.raises(HTTPException) as exc_info:
        await create_chat(data=ChatCreate(is_group=True), user=_user(), service=service)

    assert exc_info.value.status_code == 400
    assert "name" in exc_info.value.detail


@pytest.mark.asyncio
async def test_list_chats_scopes_to_caller() -> None:
    now = datetime(2026, 3, 1)
    chat = Chat(id=uuid4(), members=["alice", "bob"], created_at=now, updated_at=now)
    service = AsyncMock()
    service.list_chats.return_value = [chat]

    result = await list_chats(user=_user(), service=service)

    assert result == [chat]
    service.list_chats.assert_awaited_once_with("alice")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, expected",
    [
        (NotFoundError("missing"), 404),
        (ForbiddenError("not a member"), 403),
        (ValidationError("One-to-one chats require exactly one other member"), 400),
    ],
)
async def test_update_chat_error_mapping(error, expected) -> None:
    service = AsyncMock()
    service.update_chat.side_effect = error

    with pytest.raises(HTTPException) as exc_info:
        await update_chat(chat_id=uuid4(), update=ChatUpdate(name="x"), user=_user(), service=service)

    assert exc_info.value.status_code == expected


@pytest.mark.asyncio
async def test_delete_chat_returns_confirmation() -> None:
    service = AsyncMock()
    chat_id = uuid4()

    result = await delete_chat(chat_id=chat_id, user=_user(), service=service)

    assert result.message == "Chat deleted successfully"
    service.delete_chat.assert_awaited_once_with("alice", chat_id)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, expected",
    [
        (NotFoundError("missing"), 404),
        (ForbiddenError("not a member"), 403),
        (ValidationError("empty"), 400),
    ],
)
async def test_send_message_error_mapping(error, expected) -> None:
    service = AsyncMock()
    service.send_message.side_effect = error

    with pytest.raises(HTTPException) as exc_info:
        await send_message(
            data=MessageCreate(chat_id=uuid4(), content="hi"), user=_user(), service=service
        )

    assert exc_info.value.status_code == expected


@pytest.mark.asyncio
async def test_list_messages_forbidden_is_403() -> None:
    service = AsyncMock()
    service.list_messages.side_effect = ForbiddenError("not a member")

    with pytest.raises(HTTPException) as exc_info:
        await list_messages(chat_id=uuid4(), user=_user(), service=service, limit=50, offset=0)

    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_edit_someone_elses_message_is_403() -> None:
    service = AsyncMock()
    service.edit_message.side_effect = ForbiddenError("You can only edit your own messages")

    with pytest.raises(HTTPException) as exc_info:
        await edit_message(
            message_id=uuid4(),
            update=MessageUpdate(content="x"),
            user=_user("bob"),
            service=service,
        )

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "You can only edit your own messages"


@pytest.mark.asyncio
async def test_delete_missing_message_is_404() -> None:
    service = AsyncMock()
    service.delete_message.side_effect = NotFoundError("Message not found")

    with pytest.raises(HTTPException) as exc_info:
        await delete_message(message_id=uuid4(), user=_user(), service=service)

    assert exc_info.value.status_code == 404
