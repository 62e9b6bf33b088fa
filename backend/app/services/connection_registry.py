"""
Connection registry.

Maps a user identity to at most one live transport session. The last
registration wins: a newer session silently supersedes the older one, and a
late disconnect of the superseded session must not take the user offline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from app.core.logger import setup_logger
from app.models.enums import PresenceStatus

logger = setup_logger(__name__)

PresenceListener = Callable[[str, PresenceStatus], None]


@dataclass(frozen=True)
class Registration:
    """Outcome of a register call."""

    user_id: str
    session_id: str
    superseded_session_id: Optional[str] = None
    changed: bool = True


class ConnectionRegistry:
    """User identity -> current session id, with presence change listeners."""

    def __init__(self) -> None:
        self._session_by_user: dict[str, str] = {}
        self._user_by_session: dict[str, str] = {}
        self._listeners: list[PresenceListener] = []

    def add_listener(self, listener: PresenceListener) -> None:
        self._listeners.append(listener)

    def _notify(self, user_id: str, status: PresenceStatus) -> None:
        for listener in self._listeners:
            listener(user_id, status)

    def supersede(self, user_id: str, session_id: str) -> Optional[str]:
        """
        Point ``user_id`` at ``session_id`` and return the session it replaced.

        The replaced session keeps its transport and room memberships; it only
        stops being the user's current session, so its eventual unregister is
        a no-op for this user.
        """
        previous = self._session_by_user.get(user_id)
        if previous is not None and previous != session_id:
            self._user_by_session.pop(previous, None)
        self._session_by_user[user_id] = session_id
        self._user_by_session[session_id] = user_id
        return previous if previous != session_id else None

    def register(self, user_id: str, session_id: str) -> Registration:
        """Bind ``user_id`` to ``session_id`` and announce the user online."""
        current_user = self._user_by_session.get(session_id)
        if current_user == user_id and self._session_by_user.get(user_id) == session_id:
            return Registration(user_id=user_id, session_id=session_id, changed=False)

        if current_user is not None and current_user != user_id:
            # The session switches identity; its previous user loses this session
            self.unregister(session_id)

        superseded = self.supersede(user_id, session_id)
        if superseded:
            logger.info(
                "User %s re-registered on session %s (superseded %s)",
                user_id,
                session_id,
                superseded,
            )
        else:
            logger.info("User %s registered on session %s", user_id, session_id)

        self._notify(user_id, PresenceStatus.ONLINE)
        return Registration(
            user_id=user_id,
            session_id=session_id,
            superseded_session_id=superseded,
        )

    def unregister(self, session_id: str) -> Optional[str]:
        """
        Remove the mapping owned by exactly this session.

        Returns the user that went offline, or None when the session was never
        registered or has already been superseded.
        """
        user_id = self._user_by_session.pop(session_id, None)
        if user_id is None or self._session_by_user.get(user_id) != session_id:
            logger.debug("Ignoring stale unregister for session %s", session_id)
            return None

        del self._session_by_user[user_id]
        logger.info("User %s went offline (session %s)", user_id, session_id)
        self._notify(user_id, PresenceStatus.OFFLINE)
        return user_id

    def list_online(self) -> set[str]:
        return set(self._session_by_user)

    def is_online(self, user_id: str) -> bool:
        return user_id in self._session_by_user

    def session_for(self, user_id: str) -> Optional[str]:
        return self._session_by_user.get(user_id)

    def user_for(self, session_id: str) -> Optional[str]:
        return self._user_by_session.get(session_id)
