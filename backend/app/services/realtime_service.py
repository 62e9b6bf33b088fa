"""
Per-session outboxes for the realtime transport.

Each live session owns a queue that its socket writer drains. Publishing only
enqueues, so fan-out never suspends and events leave in the order they were
published. Outboxes are bounded: a session whose writer falls a full queue
behind is handed to ``on_overflow`` instead of growing without limit.
"""

import asyncio
from typing import Callable, Iterable, Optional

from app.core.logger import setup_logger

logger = setup_logger(__name__)

# Sentinel telling a socket writer that its session has been closed
CLOSE = None

DEFAULT_MAX_QUEUE_SIZE = 1000


class RealtimeManager:
    def __init__(
        self,
        max_queue_size: int = DEFAULT_MAX_QUEUE_SIZE,
        on_overflow: Optional[Callable[[str], object]] = None,
    ) -> None:
        """
        Args:
            max_queue_size: Frames a session may have queued (0 = unbounded)
            on_overflow: Called with the session id when its outbox is full
        """
        self._connections: dict[str, asyncio.Queue[Optional[str]]] = {}
        self._max_queue_size = max_queue_size
        self._on_overflow = on_overflow

    def connect(self, session_id: str) -> asyncio.Queue[Optional[str]]:
        queue: asyncio.Queue[Optional[str]] = asyncio.Queue(maxsize=self._max_queue_size)
        self._connections[session_id] = queue
        return queue

    def disconnect(self, session_id: str) -> bool:
        queue = self._connections.pop(session_id, None)
        if queue is None:
            return False
        if queue.full():
            # Backlog is undeliverable once the session is closed
            while not queue.empty():
                queue.get_nowait()
        queue.put_nowait(CLOSE)
        return True

    def is_connected(self, session_id: str) -> bool:
        return session_id in self._connections

    def session_ids(self) -> set[str]:
        return set(self._connections)

    def publish(self, session_id: str, message: str) -> bool:
        queue = self._connections.get(session_id)
        if queue is None:
            return False
        try:
            queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning(
                "Outbox for session %s is full (%d frames), dropping session",
                session_id,
                queue.maxsize,
            )
            if self._on_overflow is not None:
                self._on_overflow(session_id)
            return False
        return True

    def publish_many(self, session_ids: Iterable[str], message: str) -> set[str]:
        delivered = set()
        for session_id in session_ids:
            if self.publish(session_id, message):
                delivered.add(session_id)
        return delivered

    def broadcast(self, message: str) -> set[str]:
        return self.publish_many(list(self._connections), message)
