# src/talent_connect/api/v1/endpoints/admin.py
"""Admin moderation endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Query, Response, status

from talent_connect.api.v1.dependencies import AdminUserDep
from talent_connect.schemas.job import JobResponse
from talent_connect.schemas.moderation import (
    CommentResponse,
    ModerationQueueResponse,
    ReportResponse,
)
from talent_connect.schemas.profile import OwnProfileResponse

from .comments import ModerationServiceDep

router = APIRouter(prefix="/admin", tags=["admin"])

Decision = Literal["approve", "reject"]
UserAction = Literal["suspend", "activate", "make_admin", "remove_admin"]
Badge = Literal["is_secure", "is_suspicious", "fast_responder"]


@router.get("/queue", response_model=ModerationQueueResponse)
async def get_moderation_queue(
    admin: AdminUserDep,
    moderation: ModerationServiceDep,
) -> ModerationQueueResponse:
    """Return everything still waiting for a decision."""
    queue = moderation.pending_queue(admin.id)
    return ModerationQueueResponse(
        jobs=[JobResponse.model_validate(job) for job in queue.jobs],
        comments=[CommentResponse.model_validate(comment) for comment in queue.comments],
        reports=[ReportResponse.model_validate(report) for report in queue.reports],
    )


@router.post("/jobs/{job_id}/{decision}", response_model=JobResponse)
async def review_job(
    job_id: int,
    decision: Decision,
    admin: AdminUserDep,
    moderation: ModerationServiceDep,
) -> JobResponse:
    """Approve or reject a pending job."""
    return JobResponse.model_validate(moderation.review_job(admin.id, job_id, decision))


@router.delete("/jobs/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job(
    job_id: int,
    admin: AdminUserDep,
    moderation: ModerationServiceDep,
) -> Response:
    moderation.delete_job(admin.id, job_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/comments/{comment_id}/{decision}", response_model=CommentResponse)
async def review_comment(
    comment_id: int,
    decision: Decision,
    admin: AdminUserDep,
    moderation: ModerationServiceDep,
) -> CommentResponse:
    """Approve or reject a pending profile comment."""
    return CommentResponse.model_validate(moderation.review_comment(admin.id, comment_id, decision))


@router.get("/reports", response_model=list[ReportResponse])
async def list_reports(
    admin: AdminUserDep,
    moderation: ModerationServiceDep,
    status_filter: Literal["pending", "resolved"] | None = Query(None, alias="status"),
) -> list[ReportResponse]:
    return [
        ReportResponse.model_validate(report)
        for report in moderation.list_reports(admin.id, status_filter)
    ]


@router.post("/reports/{report_id}/resolve", response_model=ReportResponse)
async def resolve_report(
    report_id: int,
    admin: AdminUserDep,
    moderation: ModerationServiceDep,
) -> ReportResponse:
    return ReportResponse.model_validate(moderation.resolve_report(admin.id, report_id))


@router.post("/users/{user_id}/badges/{badge}", response_model=OwnProfileResponse)
async def toggle_user_badge(
    user_id: str,
    badge: Badge,
    admin: AdminUserDep,
    moderation: ModerationServiceDep,
) -> OwnProfileResponse:
    """Grant or revoke a profile badge."""
    return OwnProfileResponse.model_validate(moderation.toggle_badge(admin.id, user_id, badge))


@router.post("/users/{user_id}/{action}", response_model=OwnProfileResponse)
async def apply_user_action(
    user_id: str,
    action: UserAction,
    admin: AdminUserDep,
    moderation: ModerationServiceDep,
) -> OwnProfileResponse:
    """Suspend, reactivate, promote or demote a user."""
    return OwnProfileResponse.model_validate(moderation.apply_user_action(admin.id, user_id, action))


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    admin: AdminUserDep,
    moderation: ModerationServiceDep,
) -> Response:
    moderation.delete_user(admin.id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
