# src/talent_connect/api/v1/endpoints/jobs.py
"""Job posting and application endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from talent_connect.api.v1.dependencies import (
    ActiveUserDep,
    CurrentUserDep,
    NotificationFeedDep,
    RateLimiterDep,
    SessionDep,
)
from talent_connect.schemas.job import ApplicationCreate, ApplicationResponse, JobCreate, JobResponse
from talent_connect.services.jobs import JobBoard
from talent_connect.services.rate_limit import ACTION_CREATE_JOB, ACTION_SEND_APPLICATION
from talent_connect.utils.text import clean_text

router = APIRouter(prefix="/jobs", tags=["jobs"])
applications_router = APIRouter(prefix="/applications", tags=["jobs"])


def get_job_board(db: SessionDep, notifications: NotificationFeedDep) -> JobBoard:
    return JobBoard(db, notifications)


JobBoardDep = Annotated[JobBoard, Depends(get_job_board)]


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    payload: JobCreate,
    current_user: ActiveUserDep,
    board: JobBoardDep,
    rate_limiter: RateLimiterDep,
) -> JobResponse:
    """Post a job; it is listed once an admin approves it."""
    rate_limiter.enforce(current_user.id, ACTION_CREATE_JOB)
    return JobResponse.model_validate(board.create_job(current_user.id, payload))


@router.get("", response_model=list[JobResponse])
async def list_jobs(
    board: JobBoardDep,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> list[JobResponse]:
    """List approved jobs, newest first."""
    return [JobResponse.model_validate(job) for job in board.list_open_jobs(limit, offset)]


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: int,
    current_user: CurrentUserDep,
    board: JobBoardDep,
) -> JobResponse:
    return JobResponse.model_validate(board.get_visible_job(job_id, current_user.id))


@router.post("/{job_id}/filled", response_model=JobResponse)
async def toggle_job_filled(
    job_id: int,
    current_user: ActiveUserDep,
    board: JobBoardDep,
) -> JobResponse:
    """Flip the job's filled flag; creator only."""
    return JobResponse.model_validate(board.toggle_filled(job_id, current_user.id))


@router.post(
    "/{job_id}/applications",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def apply_to_job(
    job_id: int,
    payload: ApplicationCreate,
    current_user: ActiveUserDep,
    board: JobBoardDep,
    rate_limiter: RateLimiterDep,
) -> ApplicationResponse:
    """Apply to a job; counts against the ``send_application`` allowance."""
    clean_text(payload.message, field="Message")
    rate_limiter.enforce(current_user.id, ACTION_SEND_APPLICATION)
    application = board.apply(job_id, current_user.id, payload.message)
    return ApplicationResponse.model_validate(application)


@router.get("/{job_id}/applications", response_model=list[ApplicationResponse])
async def list_job_applications(
    job_id: int,
    current_user: CurrentUserDep,
    board: JobBoardDep,
) -> list[ApplicationResponse]:
    return [
        ApplicationResponse.model_validate(application)
        for application in board.applications_for_job(job_id, current_user.id)
    ]


@applications_router.get("/mine", response_model=list[ApplicationResponse])
async def list_my_applications(
    current_user: CurrentUserDep,
    board: JobBoardDep,
) -> list[ApplicationResponse]:
    return [
        ApplicationResponse.model_validate(application)
        for application in board.applications_by(current_user.id)
    ]
