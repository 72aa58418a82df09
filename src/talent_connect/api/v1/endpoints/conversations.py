# src/talent_connect/api/v1/endpoints/conversations.py
"""Conversation and message endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from talent_connect.api.v1.dependencies import (
    ActiveUserDep,
    ConversationRegistryDep,
    CurrentUserDep,
    MessageLogDep,
    RateLimiterDep,
)
from talent_connect.schemas.conversation import (
    ConversationCreate,
    ConversationResponse,
    ConversationSummary,
    MarkReadResponse,
    MessageCreate,
    MessageResponse,
    UnreadCountResponse,
)
from talent_connect.services.messages import validate_content
from talent_connect.services.rate_limit import ACTION_SEND_MESSAGE

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.post("", response_model=ConversationResponse)
async def start_conversation(
    payload: ConversationCreate,
    current_user: ActiveUserDep,
    registry: ConversationRegistryDep,
) -> ConversationResponse:
    """Return the conversation with another user, creating it on first contact."""
    conversation = registry.get_or_create(current_user.id, payload.other_user_id)
    return ConversationResponse.model_validate(conversation)


@router.get("", response_model=list[ConversationSummary])
async def list_conversations(
    current_user: CurrentUserDep,
    registry: ConversationRegistryDep,
) -> list[ConversationSummary]:
    """List the caller's conversations, most recently active first."""
    return [
        ConversationSummary.model_validate(overview)
        for overview in registry.list_for_user(current_user.id)
    ]


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_message_count(
    current_user: CurrentUserDep,
    registry: ConversationRegistryDep,
) -> UnreadCountResponse:
    return UnreadCountResponse(unread_count=registry.total_unread(current_user.id))


@router.get("/{conversation_id}/messages", response_model=list[MessageResponse])
async def list_messages(
    conversation_id: int,
    current_user: CurrentUserDep,
    registry: ConversationRegistryDep,
    messages: MessageLogDep,
    after_id: int | None = Query(None, ge=0),
    limit: int | None = Query(None, ge=1, le=200),
) -> list[MessageResponse]:
    """Return history, or only messages newer than ``after_id``."""
    conversation = registry.get_for_participant(conversation_id, current_user.id)
    return [
        MessageResponse.model_validate(message)
        for message in messages.list_since(conversation, after_id=after_id, limit=limit)
    ]


@router.post(
    "/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    conversation_id: int,
    payload: MessageCreate,
    current_user: ActiveUserDep,
    registry: ConversationRegistryDep,
    messages: MessageLogDep,
    rate_limiter: RateLimiterDep,
) -> MessageResponse:
    """Send a message; counts against the ``send_message`` allowance."""
    validate_content(payload.content)
    conversation = registry.get_for_participant(conversation_id, current_user.id)
    messages.ensure_can_send(conversation, current_user.id)
    rate_limiter.enforce(current_user.id, ACTION_SEND_MESSAGE)
    message = messages.append(conversation, current_user.id, payload.content)
    return MessageResponse.model_validate(message)


@router.post("/{conversation_id}/read", response_model=MarkReadResponse)
async def mark_conversation_read(
    conversation_id: int,
    current_user: CurrentUserDep,
    registry: ConversationRegistryDep,
    messages: MessageLogDep,
) -> MarkReadResponse:
    """Mark every message from the other participant as read."""
    conversation = registry.get_for_participant(conversation_id, current_user.id)
    flipped = messages.mark_read(conversation, current_user.id)
    return MarkReadResponse(conversation_id=conversation.id, marked_read=flipped)
