"""
Message API endpoints.

REST is the source of truth for message fan-out: a send pushes newMessage to
the chat room and chatLastMessageUpdate to everyone, in that order; edits and
deletes push messageUpdated / messageDeleted to the room.
"""

from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from app.api.deps import CurrentUser, MessageSvc
from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.models.message import Message, MessageCreate, MessageUpdate

router = APIRouter()


class DeleteMessageResponse(BaseModel):
    message: str


@router.post(
    "/message",
    response_model=Message,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    data: MessageCreate,
    user: CurrentUser,
    service: MessageSvc,
):
    """Send a message to a chat the caller belongs to."""
    try:
        return await service.send_message(user.id, data)
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


@router.get("/messages/{chat_id}", response_model=list[Message])
async def list_messages(
    chat_id: UUID,
    user: CurrentUser,
    service: MessageSvc,
    limit: int = Query(500, ge=1, le=1000),
    offset: int = Query(0, ge=0),
):
    """
    Get a chat's message history, oldest first.

    The default page is the latest messages; raise ``offset`` to load older ones.
    """
    try:
        return await service.list_messages(user.id, chat_id, limit=limit, offset=offset)
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


@router.patch("/message/edit/{message_id}", response_model=Message)
async def edit_message(
    message_id: UUID,
    update: MessageUpdate,
    user: CurrentUser,
    service: MessageSvc,
):
    """Edit a message (author only)."""
    try:
        return await service.edit_message(user.id, message_id, update.content)
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


@router.delete("/message/delete/{message_id}", response_model=DeleteMessageResponse)
async def delete_message(
    message_id: UUID,
    user: CurrentUser,
    service: MessageSvc,
):
    """Delete a message (author only)."""
    try:
        await service.delete_message(user.id, message_id)
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
    return DeleteMessageResponse(message="Message deleted successfully")
