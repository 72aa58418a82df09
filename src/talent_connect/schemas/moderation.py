# src/talent_connect/schemas/moderation.py
"""Moderation, comment and report schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .job import JobResponse


class CommentCreate(BaseModel):
    content: str = Field(..., description="Comment text; markup is stripped")


class CommentResponse(BaseModel):
    id: int
    profile_id: str
    author_id: str
    content: str
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReportCreate(BaseModel):
    target_type: Literal["job", "profile"]
    target_id: str = Field(..., min_length=1, max_length=64)
    reason: str = Field(..., min_length=1, max_length=100)
    details: str | None = Field(None, max_length=2000)


class ReportResponse(BaseModel):
    id: int
    reporter_id: str
    target_type: str
    target_id: str
    reason: str
    details: str | None = None
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ModerationQueueResponse(BaseModel):
    """Items waiting for an admin decision."""

    jobs: list[JobResponse]
    comments: list[CommentResponse]
    reports: list[ReportResponse]
