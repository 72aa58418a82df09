# src/talent_connect/api/v1/endpoints/notifications.py
"""Notification feed endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, Response, status

from talent_connect.api.v1.dependencies import CurrentUserDep, NotificationFeedDep
from talent_connect.core.settings import settings
from talent_connect.schemas.conversation import UnreadCountResponse
from talent_connect.schemas.notification import MarkAllReadResponse, NotificationResponse

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    current_user: CurrentUserDep,
    feed: NotificationFeedDep,
    limit: int | None = Query(None, ge=1, le=100),
) -> list[NotificationResponse]:
    """Return the caller's newest notifications."""
    items = feed.recent(current_user.id, limit=limit or settings.notification_page_size)
    return [NotificationResponse.model_validate(item) for item in items]


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_notification_count(
    current_user: CurrentUserDep,
    feed: NotificationFeedDep,
) -> UnreadCountResponse:
    return UnreadCountResponse(unread_count=feed.unread_count(current_user.id))


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_notifications_read(
    current_user: CurrentUserDep,
    feed: NotificationFeedDep,
) -> MarkAllReadResponse:
    return MarkAllReadResponse(marked_read=feed.mark_all_read(current_user.id))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: int,
    current_user: CurrentUserDep,
    feed: NotificationFeedDep,
) -> NotificationResponse:
    return NotificationResponse.model_validate(feed.mark_read(notification_id, current_user.id))


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: int,
    current_user: CurrentUserDep,
    feed: NotificationFeedDep,
) -> Response:
    feed.delete(notification_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
