# src/talent_connect/api/v1/endpoints/comments.py
"""Profile comment and report endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from talent_connect.api.v1.dependencies import (
    ActiveUserDep,
    CurrentUserDep,
    NotificationFeedDep,
    SessionDep,
)
from talent_connect.schemas.moderation import (
    CommentCreate,
    CommentResponse,
    ReportCreate,
    ReportResponse,
)
from talent_connect.services.moderation import ModerationService

router = APIRouter(tags=["comments", "reports"])


def get_moderation_service(db: SessionDep, notifications: NotificationFeedDep) -> ModerationService:
    return ModerationService(db, notifications)


ModerationServiceDep = Annotated[ModerationService, Depends(get_moderation_service)]


@router.post(
    "/profiles/{profile_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def comment_on_profile(
    profile_id: str,
    payload: CommentCreate,
    current_user: ActiveUserDep,
    moderation: ModerationServiceDep,
) -> CommentResponse:
    """Leave a comment; it stays hidden until an admin approves it."""
    comment = moderation.submit_comment(current_user.id, profile_id, payload.content)
    return CommentResponse.model_validate(comment)


@router.get("/profiles/{profile_id}/comments", response_model=list[CommentResponse])
async def list_profile_comments(
    profile_id: str,
    current_user: CurrentUserDep,
    moderation: ModerationServiceDep,
) -> list[CommentResponse]:
    """Return approved comments on a profile."""
    return [
        CommentResponse.model_validate(comment)
        for comment in moderation.approved_comments(profile_id)
    ]


@router.post("/reports", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def submit_report(
    payload: ReportCreate,
    current_user: ActiveUserDep,
    moderation: ModerationServiceDep,
) -> ReportResponse:
    """Report a job or a profile to the admins."""
    report = moderation.submit_report(
        current_user.id,
        payload.target_type,
        payload.target_id,
        payload.reason,
        payload.details,
    )
    return ReportResponse.model_validate(report)
