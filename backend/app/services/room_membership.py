"""
Room membership manager.

Tracks which sessions subscribed to which chat's event stream. Membership
comes only from an explicit join; it is not derived from the persisted
member list, so a backgrounded client that never joined receives no
room-scoped events. There is no leave: memberships end with the session.
"""

from __future__ import annotations

from collections import defaultdict

from app.core.logger import setup_logger

logger = setup_logger(__name__)


class RoomMembershipManager:
    def __init__(self) -> None:
        self._members: dict[str, set[str]] = defaultdict(set)
        self._rooms: dict[str, set[str]] = defaultdict(set)

    def join(self, session_id: str, chat_id: str) -> bool:
        """Subscribe a session to a chat. Returns False if it was already joined."""
        members = self._members[chat_id]
        if session_id in members:
            return False
        members.add(session_id)
        self._rooms[session_id].add(chat_id)
        logger.debug("Session %s joined chat %s", session_id, chat_id)
        return True

    def members_of(self, chat_id: str) -> set[str]:
        return set(self._members.get(chat_id, ()))

    def rooms_of(self, session_id: str) -> set[str]:
        return set(self._rooms.get(session_id, ()))

    def drop_session(self, session_id: str) -> int:
        """Remove the session from every room. Returns how many rooms it left."""
        rooms = self._rooms.pop(session_id, set())
        for chat_id in rooms:
            members = self._members.get(chat_id)
            if members is None:
                continue
            members.discard(session_id)
            if not members:
                del self._members[chat_id]
        return len(rooms)
