"""
Realtime hub.

Owns every piece of in-memory realtime state for one server process
(session outboxes, connection registry, room memberships) and the services
built on it. One hub is created per application and handed to the REST and
socket handlers; nothing here is module-global.

Session lifecycle: Connected (no identity) -> Registered -> Disconnected.
All state mutations are synchronous, so a disconnect removes the session
from the registry and from every room before any other handler runs.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional
from uuid import UUID, uuid4

from pydantic import ValidationError as PydanticValidationError

from app.core.logger import setup_logger
from app.interfaces.chat_repository import IChatRepository
from app.models.enums import ClientEvent, ServerEvent
from app.models.events import (
    ChatScopedPayload,
    InboundFrame,
    OutboundFrame,
    SendMessagePayload,
)
from app.services.connection_registry import ConnectionRegistry
from app.services.event_router import EventRouter
from app.services.presence_service import PresenceBroadcaster
from app.services.realtime_service import DEFAULT_MAX_QUEUE_SIZE, RealtimeManager
from app.services.room_membership import RoomMembershipManager

logger = setup_logger(__name__)


class SessionState(str, Enum):
    CONNECTED = "CONNECTED"
    REGISTERED = "REGISTERED"
    DISCONNECTED = "DISCONNECTED"


@dataclass
class Session:
    """One live transport connection."""

    id: str
    verified_user_id: Optional[str] = None
    user_id: Optional[str] = None
    state: SessionState = SessionState.CONNECTED
    connected_at: float = 0.0
    last_seen: float = 0.0


def _identifier(data: Any, key: str) -> Optional[str]:
    """Accept either a bare string payload or ``{key: "..."}``."""
    if isinstance(data, dict):
        data = data.get(key)
    if isinstance(data, (str, int)) and str(data).strip():
        return str(data).strip()
    return None


class RealtimeHub:
    def __init__(
        self,
        chat_repo: Optional[IChatRepository] = None,
        clock: Callable[[], float] = time.monotonic,
        outbox_limit: int = DEFAULT_MAX_QUEUE_SIZE,
    ) -> None:
        self._chat_repo = chat_repo
        self._clock = clock
        self._sessions: dict[str, Session] = {}
        # A session that cannot keep up is closed like any other disconnect
        self.manager = RealtimeManager(max_queue_size=outbox_limit, on_overflow=self.disconnect)
        self.registry = ConnectionRegistry()
        self.rooms = RoomMembershipManager()
        self.presence = PresenceBroadcaster(self.registry, self.manager)
        self.router = EventRouter(self.manager, self.rooms, self.registry)

    # ===========================================
    # Session lifecycle
    # ===========================================

    def connect(self, verified_user_id: Optional[str] = None):
        """Open a session. Returns the session and the outbox its writer drains."""
        now = self._clock()
        session = Session(
            id=uuid4().hex,
            verified_user_id=verified_user_id,
            connected_at=now,
            last_seen=now,
        )
        self._sessions[session.id] = session
        outbox = self.manager.connect(session.id)
        logger.info("Session %s connected", session.id)
        return session, outbox

    def disconnect(self, session_id: str) -> bool:
        """Tear down all state for a session. Safe to call more than once."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.state = SessionState.DISCONNECTED
        self.manager.disconnect(session_id)
        self.rooms.drop_session(session_id)
        self.registry.unregister(session_id)
        logger.info("Session %s disconnected", session_id)
        return True

    def get_session(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def session_count(self) -> int:
        return len(self._sessions)

    def touch(self, session_id: str) -> None:
        session = self._sessions.get(session_id)
        if session is not None:
            session.last_seen = self._clock()

    def reap_idle(self, timeout_seconds: float) -> list[str]:
        """Disconnect sessions that sent nothing for ``timeout_seconds``."""
        cutoff = self._clock() - timeout_seconds
        stale = [sid for sid, s in self._sessions.items() if s.last_seen < cutoff]
        for session_id in stale:
            logger.info("Reaping idle session %s", session_id)
            self.disconnect(session_id)
        return stale

    # ===========================================
    # Client events
    # ===========================================

    def register(self, session_id: str, user_id: str) -> bool:
        session = self._sessions.get(session_id)
        if session is None:
            return False
        if session.verified_user_id and session.verified_user_id != user_id:
            logger.debug(
                "Session %s authenticated as %s may not register as %s",
                session_id,
                session.verified_user_id,
                user_id,
            )
            return False
        self.registry.register(user_id, session_id)
        session.user_id = user_id
        session.state = SessionState.REGISTERED
        self.presence.send_snapshot(session_id)
        return True

    async def join_chat(self, session_id: str, chat_id: str) -> bool:
        session = self._sessions.get(session_id)
        if session is None:
            return False

        if self._chat_repo is not None:
            if session.user_id is None:
                logger.debug("Unregistered session %s cannot join %s", session_id, chat_id)
                return False
            try:
                chat = await self._chat_repo.get(UUID(chat_id))
            except ValueError:
                return False
            if chat is None or not chat.has_member(session.user_id):
                logger.debug("Session %s is not allowed in chat %s", session_id, chat_id)
                return False
            # The session may have gone away while the lookup was in flight
            if session_id not in self._sessions:
                return False

        return self.rooms.join(session_id, chat_id)

    async def handle_frame(self, session_id: str, raw: str) -> None:
        """Dispatch one inbound frame. Malformed or stale frames are dropped."""
        if session_id not in self._sessions:
            return
        self.touch(session_id)

        try:
            frame = InboundFrame.model_validate(json.loads(raw))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            logger.debug("Dropping malformed frame from %s: %s", session_id, e)
            return

        try:
            event = ClientEvent(frame.event)
        except ValueError:
            logger.debug("Dropping unknown event %r from %s", frame.event, session_id)
            return

        if event == ClientEvent.REGISTER:
            user_id = _identifier(frame.data, "userId")
            if user_id:
                self.register(session_id, user_id)
        elif event == ClientEvent.JOIN_CHAT:
            chat_id = _identifier(frame.data, "chatId")
            if chat_id:
                await self.join_chat(session_id, chat_id)
        elif event == ClientEvent.GET_ONLINE_USERS:
            self.presence.send_snapshot(session_id)
        elif event == ClientEvent.PING:
            self.manager.publish(session_id, OutboundFrame(event=ServerEvent.PONG).to_json())
        else:
            self._ignore_mirror(session_id, event, frame.data)

    def _ignore_mirror(self, session_id: str, event: ClientEvent, data: Any) -> None:
        # REST handlers already validated, persisted and fanned these out
        try:
            if event == ClientEvent.SEND_MESSAGE:
                SendMessagePayload.model_validate(data)
            elif event in (ClientEvent.UPDATE_MESSAGE, ClientEvent.DELETE_MESSAGE):
                ChatScopedPayload.model_validate(data)
        except PydanticValidationError:
            logger.debug("Dropping malformed %s mirror from %s", event.value, session_id)
            return
        logger.debug("Ignoring client %s mirror from %s", event.value, session_id)
