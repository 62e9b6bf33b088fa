"""
Presence broadcaster.

Presence is globally visible: every online/offline transition is pushed to
all connected sessions, not just room members. Late joiners pull a
point-in-time snapshot instead of waiting for the next transition.
"""

from __future__ import annotations

from app.core.logger import setup_logger
from app.models.enums import PresenceStatus
from app.models.events import PresenceChanged, online_users_frame
from app.services.connection_registry import ConnectionRegistry
from app.services.realtime_service import RealtimeManager

logger = setup_logger(__name__)


class PresenceBroadcaster:
    def __init__(self, registry: ConnectionRegistry, manager: RealtimeManager) -> None:
        self._registry = registry
        self._manager = manager
        registry.add_listener(self.announce)

    def announce(self, user_id: str, status: PresenceStatus) -> set[str]:
        """Broadcast a userStatusChange to every connected session."""
        frame = PresenceChanged(user_id=user_id, status=status).to_frame()
        delivered = self._manager.broadcast(frame.to_json())
        logger.debug(
            "Presence %s for %s delivered to %d session(s)",
            status.value,
            user_id,
            len(delivered),
        )
        return delivered

    def snapshot(self) -> list[str]:
        return sorted(self._registry.list_online())

    def send_snapshot(self, session_id: str) -> bool:
        """Reply to one session with the current onlineUsers list."""
        return self._manager.publish(session_id, online_users_frame(self.snapshot()).to_json())
