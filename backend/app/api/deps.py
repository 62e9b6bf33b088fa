"""
Dependency injection for API endpoints.

This module provides FastAPI dependencies that inject the correct
infrastructure implementations based on environment configuration.
The realtime hub is per-application state and is read from ``app.state``.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from starlette.requests import HTTPConnection

from app.core.config import Settings, get_settings
from app.interfaces.auth_provider import IAuthProvider, User
from app.interfaces.chat_repository import IChatRepository
from app.interfaces.message_repository import IMessageRepository
from app.services.chat_service import ChatService, MessageService
from app.services.realtime_hub import RealtimeHub


# ===========================================
# Repository Dependencies
# ===========================================


@lru_cache()
def get_chat_repository() -> IChatRepository:
    """Get chat repository instance."""
    from app.infrastructure.local.chat_repository import SqliteChatRepository
    return SqliteChatRepository()


@lru_cache()
def get_message_repository() -> IMessageRepository:
    """Get message repository instance."""
    from app.infrastructure.local.message_repository import SqliteMessageRepository
    return SqliteMessageRepository()


@lru_cache()
def get_auth_provider() -> IAuthProvider:
    """Get auth provider instance."""
    settings = get_settings()
    if settings.AUTH_PROVIDER == "local":
        from app.infrastructure.auth.local_auth import LocalAuthProvider

        return LocalAuthProvider(settings)

    from app.infrastructure.local.mock_auth import MockAuthProvider
    return MockAuthProvider(enabled=True)


# ===========================================
# Realtime / Service Dependencies
# ===========================================


def get_realtime_hub(conn: HTTPConnection) -> RealtimeHub:
    """Get the application's realtime hub (works for HTTP and WebSocket routes)."""
    return conn.app.state.realtime_hub


def get_chat_service(
    hub: Annotated[RealtimeHub, Depends(get_realtime_hub)],
    chat_repo: Annotated[IChatRepository, Depends(get_chat_repository)],
    message_repo: Annotated[IMessageRepository, Depends(get_message_repository)],
) -> ChatService:
    return ChatService(chat_repo, message_repo, hub.router)


def get_message_service(
    hub: Annotated[RealtimeHub, Depends(get_realtime_hub)],
    chat_repo: Annotated[IChatRepository, Depends(get_chat_repository)],
    message_repo: Annotated[IMessageRepository, Depends(get_message_repository)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageService:
    return MessageService(chat_repo, message_repo, hub.router, settings)


# ===========================================
# User Authentication
# ===========================================


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> User:
    """
    Get current authenticated user.

    In mock mode, the bearer token is the user id.
    In local mode, validates an HS256 JWT.
    """
    if not auth_provider.is_enabled():
        # Mock user for development
        return User(id="dev_user", email="dev@example.com", display_name="Developer")

    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
        )

    # Extract token from "Bearer <token>"
    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise ValueError("Invalid scheme")
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )

    try:
        return await auth_provider.verify_token(token)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )


# ===========================================
# Type Aliases for Dependency Injection
# ===========================================

ChatRepo = Annotated[IChatRepository, Depends(get_chat_repository)]
MessageRepo = Annotated[IMessageRepository, Depends(get_message_repository)]
AuthProvider = Annotated[IAuthProvider, Depends(get_auth_provider)]
Hub = Annotated[RealtimeHub, Depends(get_realtime_hub)]
ChatSvc = Annotated[ChatService, Depends(get_chat_service)]
MessageSvc = Annotated[MessageService, Depends(get_message_service)]
CurrentUser = Annotated[User, Depends(get_current_user)]
