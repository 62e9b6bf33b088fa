"""
Chat API endpoints.

Successful mutations push realtime events after the store write:
create/edit -> newChatCreated (to added members), delete -> chatDeleted.
"""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from app.api.deps import ChatSvc, CurrentUser
from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.models.chat import Chat, ChatCreate, ChatUpdate

router = APIRouter()


class DeleteChatResponse(BaseModel):
    message: str


@router.post(
    "/chat/create",
    response_model=Chat,
    status_code=status.HTTP_201_CREATED,
)
async def create_chat(
    data: ChatCreate,
    user: CurrentUser,
    service: ChatSvc,
):
    """Create a chat. The caller is always a member."""
    try:
        return await service.create_chat(user.id, data)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get("/chats", response_model=list[Chat])
async def list_chats(
    user: CurrentUser,
    service: ChatSvc,
):
    """List the caller's chats, most recently active first."""
    return await service.list_chats(user.id)


@router.patch("/chat/edit/{chat_id}", response_model=Chat)
async def update_chat(
    chat_id: UUID,
    update: ChatUpdate,
    user: CurrentUser,
    service: ChatSvc,
):
    """Rename a chat or replace its members (members only)."""
    try:
        return await service.update_chat(user.id, chat_id, update)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except ForbiddenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e),
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.delete("/chat/delete/{chat_id}", response_model=DeleteChatResponse)
async def delete_chat(
    chat_id: UUID,
    user: CurrentUser,
    service: ChatSvc,
):
    """Delete a chat and its messages (members only)."""
    try:
        await service.delete_chat(user.id, chat_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except ForbiddenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e),
        )
    return DeleteChatResponse(message="Chat deleted successfully")
