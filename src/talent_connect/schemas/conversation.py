# src/talent_connect/schemas/conversation.py
"""Conversation, message and block schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .profile import CounterpartResponse


class ConversationCreate(BaseModel):
    """Start (or reopen) a conversation with another user."""

    other_user_id: str = Field(..., min_length=1, max_length=64)


class ConversationResponse(BaseModel):
    id: int
    participant_1: str
    participant_2: str
    last_message_at: datetime
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LastMessageResponse(BaseModel):
    content: str
    sender_id: str

    model_config = ConfigDict(from_attributes=True)


class ConversationSummary(ConversationResponse):
    """Inbox entry as seen by one participant."""

    other_user: CounterpartResponse | None = None
    last_message: LastMessageResponse | None = None
    unread_count: int = 0


class MessageCreate(BaseModel):
    content: str = Field(..., description="Message text; markup is stripped")


class MessageResponse(BaseModel):
    id: int
    conversation_id: int
    sender_id: str
    content: str
    read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MarkReadResponse(BaseModel):
    conversation_id: int
    marked_read: int


class UnreadCountResponse(BaseModel):
    unread_count: int


class BlockStatusResponse(BaseModel):
    """Block relation between the caller and another user."""

    user_id: str
    has_blocked: bool
    is_blocked_by: bool

    model_config = ConfigDict(from_attributes=True)
