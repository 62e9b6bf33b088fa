"""
Unit tests for RoomMembershipManager.
"""

from app.services.room_membership import RoomMembershipManager


def test_join_is_idempotent():
    rooms = RoomMembershipManager()

    assert rooms.join("s1", "chat-1") is True
    once = rooms.members_of("chat-1")
    assert rooms.join("s1", "chat-1") is False

    assert rooms.members_of("chat-1") == once == {"s1"}


def test_members_of_unknown_chat_is_empty():
    assert RoomMembershipManager().members_of("nope") == set()


def test_drop_session_removes_it_from_every_room():
    rooms = RoomMembershipManager()
    for chat_id in ("a", "b", "c"):
        rooms.join("s1", chat_id)
    rooms.join("s2", "a")

    assert rooms.drop_session("s1") == 3

    for chat_id in ("a", "b", "c"):
        assert "s1" not in rooms.members_of(chat_id)
    assert rooms.members_of("a") == {"s2"}
    assert rooms.rooms_of("s1") == set()


def test_drop_session_twice_is_harmless():
    rooms = RoomMembershipManager()
    rooms.join("s1", "a")
    rooms.drop_session("s1")

    assert rooms.drop_session("s1") == 0


def test_members_of_returns_a_copy():
    rooms = RoomMembershipManager()
    rooms.join("s1", "a")

    rooms.members_of("a").add("intruder")

    assert rooms.members_of("a") == {"s1"}
