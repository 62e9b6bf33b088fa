"""
Message model definitions.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MessageCreate(BaseModel):
    """Schema for sending a message."""

    model_config = ConfigDict(populate_by_name=True)

    chat_id: UUID = Field(..., alias="chatId")
    content: Optional[str] = Field(None, max_length=10000)
    image_url: Optional[str] = Field(None, alias="imageUrl")


class MessageUpdate(BaseModel):
    """Schema for editing a message."""

    content: str = Field(..., min_length=1, max_length=10000)


class Message(BaseModel):
    """Complete message model, as delivered in newMessage events."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID = Field(..., alias="_id")
    chat_id: UUID = Field(..., alias="chat")
    sender_id: str = Field(..., alias="sender")
    content: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    timestamp: datetime
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
