"""
Realtime transport.

One WebSocket per client session. Inbound frames go to the hub; a writer task
drains the session outbox so fan-out never waits on a slow socket.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from app.api.deps import AuthProvider, CurrentUser, Hub
from app.core.logger import setup_logger

router = APIRouter()
logger = setup_logger(__name__)


@router.get("/online", response_model=list[str])
async def list_online_users(
    user: CurrentUser,
    hub: Hub,
) -> list[str]:
    """Point-in-time snapshot of registered users."""
    return hub.presence.snapshot()


@router.websocket("/ws")
async def realtime_socket(
    websocket: WebSocket,
    hub: Hub,
    auth_provider: AuthProvider,
    token: Optional[str] = Query(None),
) -> None:
    verified_user_id = None
    if token:
        try:
            verified_user_id = (await auth_provider.verify_token(token)).id
        except Exception as e:
            logger.info(f"Rejecting realtime socket: {e}")
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

    await websocket.accept()
    session, outbox = hub.connect(verified_user_id=verified_user_id)

    async def writer() -> None:
        while True:
            message = await outbox.get()
            if message is None:
                # Session was torn down server-side (e.g. reaped)
                await websocket.close()
                return
            await websocket.send_text(message)

    writer_task = asyncio.create_task(writer())
    try:
        while True:
            raw = await websocket.receive_text()
            await hub.handle_frame(session.id, raw)
    except (WebSocketDisconnect, RuntimeError):
        pass
    finally:
        hub.disconnect(session.id)
        writer_task.cancel()
        await asyncio.gather(writer_task, return_exceptions=True)
