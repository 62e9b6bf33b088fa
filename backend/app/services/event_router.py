"""
Event router.

Fans domain events out to sessions according to each event's delivery scope:

- ROOM (newMessage, messageUpdated, messageDeleted): sessions joined to the chat
- BROADCAST (chatLastMessageUpdate, chatDeleted, userStatusChange): every session
- USERS (newChatCreated): current sessions of the listed recipients, looked up
  in the connection registry because nobody has joined the new room yet

Offline recipients are skipped. There is no queueing or retry; clients that
missed events recover through the REST endpoints.
"""

from __future__ import annotations

from app.core.logger import setup_logger
from app.models.enums import DeliveryScope
from app.models.events import ChatEvent
from app.services.connection_registry import ConnectionRegistry
from app.services.realtime_service import RealtimeManager
from app.services.room_membership import RoomMembershipManager

logger = setup_logger(__name__)


class EventRouter:
    def __init__(
        self,
        manager: RealtimeManager,
        rooms: RoomMembershipManager,
        registry: ConnectionRegistry,
    ) -> None:
        self._manager = manager
        self._rooms = rooms
        self._registry = registry

    def targets_for(self, event: ChatEvent) -> set[str]:
        """Resolve the session ids an event should reach right now."""
        scope = event.scope
        if scope == DeliveryScope.ROOM:
            return self._rooms.members_of(str(event.chat_id))
        if scope == DeliveryScope.USERS:
            targets = set()
            for user_id in event.recipients:
                session_id = self._registry.session_for(user_id)
                if session_id is not None:
                    targets.add(session_id)
            return targets
        return self._manager.session_ids()

    def route(self, event: ChatEvent) -> set[str]:
        """
        Deliver an event and return the sessions it reached.

        Never suspends: callers that route several events in a row get them
        delivered in that order.
        """
        targets = self.targets_for(event)
        if not targets:
            logger.debug("No live targets for %s", event.kind)
            return set()
        delivered = self._manager.publish_many(targets, event.to_frame().to_json())
        logger.debug("Routed %s to %d session(s)", event.kind, len(delivered))
        return delivered

    def route_all(self, events: list[ChatEvent]) -> list[set[str]]:
        return [self.route(event) for event in events]
