"""
Chat model definitions.

Field aliases follow the wire format the mobile client reads
(`_id`, `isGroup`, `lastMessage`, ...).
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class LastMessage(BaseModel):
    """Denormalized preview of the most recent message in a chat."""

    content: str
    timestamp: datetime


class ChatBase(BaseModel):
    """Base chat fields."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, max_length=200, description="Chat name (groups)")
    is_group: bool = Field(False, alias="isGroup", description="Group chat flag")


class ChatCreate(ChatBase):
    """Schema for creating a chat. The creator is always added as a member."""

    members: list[str] = Field(default_factory=list, description="Member user IDs")
    group_image_url: Optional[str] = Field(None, alias="groupImageUrl")


class ChatUpdate(BaseModel):
    """Schema for editing a chat (all fields optional)."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, max_length=200)
    members: Optional[list[str]] = None


class Chat(ChatBase):
    """Complete chat model."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID = Field(..., alias="_id")
    members: list[str] = Field(default_factory=list)
    group_image_url: Optional[str] = Field(None, alias="groupImageUrl")
    last_message: Optional[LastMessage] = Field(None, alias="lastMessage")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    def has_member(self, user_id: str) -> bool:
        return user_id in self.members
