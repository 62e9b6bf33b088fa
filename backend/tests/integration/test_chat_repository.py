"""
Integration tests for SqliteChatRepository against in-memory SQLite.
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from app.core.exceptions import NotFoundError
from app.infrastructure.local.chat_repository import SqliteChatRepository
from app.models.chat import ChatCreate, ChatUpdate


@pytest.fixture
def repo(session_factory):
    return SqliteChatRepository(session_factory)


@pytest.mark.asyncio
async def test_create_and_get_keeps_member_order(repo):
    chat = await repo.create(ChatCreate(name="team", is_group=True), ["b", "c", "a"])

    fetched = await repo.get(chat.id)

    assert fetched is not None
    assert fetched.name == "team"
    assert fetched.is_group is True
    assert fetched.members == ["b", "c", "a"]
    assert fetched.last_message is None


@pytest.mark.asyncio
async def test_get_missing_returns_none(repo):
    assert await repo.get(uuid4()) is None


@pytest.mark.asyncio
async def test_list_for_member_orders_by_activity(repo):
    older = await repo.create(ChatCreate(), ["alice", "bob"])
    newer = await repo.create(ChatCreate(), ["alice", "carol"])
    await repo.create(ChatCreate(), ["bob", "carol"])

    await repo.set_last_message(older.id, "ping", datetime.now(timezone.utc) + timedelta(minutes=5))

    chats = await repo.list_for_member("alice")

    assert [c.id for c in chats] == [older.id, newer.id]
    assert chats[0].last_message.content == "ping"


@pytest.mark.asyncio
async def test_update_replaces_members_and_name(repo):
    chat = await repo.create(ChatCreate(name="old", is_group=True), ["a", "b"])

    updated = await repo.update(chat.id, ChatUpdate(name="new", members=["b", "c", "a"]))

    assert updated.name == "new"
    assert updated.members == ["b", "c", "a"]
    assert (await repo.get(chat.id)).members == ["b", "c", "a"]
    assert await repo.list_for_member("c") != []


@pytest.mark.asyncio
async def test_update_missing_chat_raises(repo):
    with pytest.raises(NotFoundError):
        await repo.update(uuid4(), ChatUpdate(name="x"))


@pytest.mark.asyncio
async def test_delete(repo):
    chat = await repo.create(ChatCreate(), ["a", "b"])

    assert await repo.delete(chat.id) is True
    assert await repo.get(chat.id) is None
    assert await repo.list_for_member("a") == []
    assert await repo.delete(chat.id) is False
