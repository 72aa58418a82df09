# src/talent_connect/schemas/profile.py
"""Profile schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""

    full_name: str | None = Field(None, max_length=200)
    role: Literal["freelancer", "employer"] | None = None
    title: str | None = Field(None, max_length=200)
    bio: str | None = Field(None, max_length=5000)
    location: str | None = Field(None, max_length=200)
    avatar_url: str | None = Field(None, max_length=2000)
    skills: list[str] | None = Field(None, description="Skill tags, stored comma-separated")
    hourly_rate: str | None = Field(None, max_length=50)
    company_name: str | None = Field(None, max_length=200)


class ProfileResponse(BaseModel):
    """Public view of a profile."""

    id: str
    full_name: str | None = None
    role: str | None = None
    title: str | None = None
    bio: str | None = None
    location: str | None = None
    avatar_url: str | None = None
    skills: list[str] = Field(default_factory=list, validation_alias="skill_list")
    hourly_rate: str | None = None
    company_name: str | None = None
    is_secure: bool = False
    is_suspicious: bool = False
    fast_responder: bool = False
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class OwnProfileResponse(ProfileResponse):
    """Profile as seen by its owner, including account flags."""

    email: str | None = None
    is_admin: bool = False
    is_suspended: bool = False


class CounterpartResponse(BaseModel):
    id: str
    full_name: str | None = None
    avatar_url: str | None = None

    model_config = ConfigDict(from_attributes=True)
