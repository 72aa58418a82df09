# src/talent_connect/schemas/job.py
"""Job and application schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class JobCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=10000)
    category: str | None = Field(None, max_length=100)
    job_type: str | None = Field(None, max_length=50)
    salary_range: str | None = Field(None, max_length=100)
    urgency: str | None = Field(None, max_length=50)


class JobResponse(BaseModel):
    id: int
    creator_id: str
    title: str
    description: str
    category: str | None = None
    job_type: str | None = None
    salary_range: str | None = None
    urgency: str | None = None
    status: str
    is_filled: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ApplicationCreate(BaseModel):
    message: str = Field(..., description="Cover note sent to the job's creator")


class ApplicationResponse(BaseModel):
    id: int
    job_id: int
    applicant_id: str
    message: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
